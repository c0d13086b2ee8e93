"""Attendance Guard package.

Organized by feature modules (geofence, liveness, attendance, corrections, ...)
with service/repository layers and a thin workflow layer that talks to devices.
"""

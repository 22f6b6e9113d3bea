"""
Clinic Scheduling Service

A FastAPI-based backend for a clinic: doctor and patient records,
role-scoped authentication, slot-based appointment booking and
prescriptions.
"""

__version__ = "1.0.0"

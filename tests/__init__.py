"""
Test suite for the Clinic Scheduling Service.

Contains unit and integration tests for the application's functionality.
"""

"""Class Attendance package.

Organized by feature modules (roster, attendance) with a thin Flask controller
layer on top of the session state machine, record stores and report services.
"""

"""
Back-office services: intake, review, access control, notifications,
dashboard aggregation and the activity log.
"""

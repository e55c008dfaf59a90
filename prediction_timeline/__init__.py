"""
prediction_timeline

Client for submitting one date prediction per session and viewing
everyone's predictions on a timeline.

Structure:
- model: timeline coordinate mapping
- state: observable session state
- storage: hosted database client
- services: controller and session persistence
- utils: date formatting and session ids
"""

__version__ = "1.0.0"

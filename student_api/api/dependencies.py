"""Route dependencies - explicit access to per-app state."""

from fastapi import Request

from student_api.config import Settings


def get_settings(request: Request) -> Settings:
    """Settings the app was built with (stored by create_app)."""
    return request.app.state.settings

import os
import tempfile

# Point the app at a throwaway SQLite file before anything imports settings
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), f'wardrobe-test-{os.getpid()}.db')}",
)

import pytest
from app.main import app
from app.auth import deps as auth_deps


@pytest.fixture(autouse=True)
def override_auth():
    app.dependency_overrides[auth_deps.get_current_user_id] = lambda: "test-user"
    yield
    app.dependency_overrides.pop(auth_deps.get_current_user_id, None)

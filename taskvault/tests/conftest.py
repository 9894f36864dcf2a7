import pytest
from fastapi.testclient import TestClient

from taskvault.config import Settings
from taskvault.database import Database
from taskvault.main import create_app
from taskvault.services.tasks import TaskService
from taskvault.vault.cache import LocalCredentialCache
from taskvault.vault.hasher import CredentialHasher
from taskvault.vault.repository import TaskRepository
from taskvault.vault.resolver import IdentityResolver

@pytest.fixture
def hasher():
    # cheapest argon2id parameters; production cost is far too slow for a test run
    return CredentialHasher(time_cost=1, memory_cost=8, parallelism=1, hash_len=16)

@pytest.fixture
def database():
    db = Database("sqlite://")
    yield db
    db.dispose()

@pytest.fixture
def session(database):
    s = database.session()
    yield s
    s.close()

@pytest.fixture
def repo(session):
    return TaskRepository(session)

@pytest.fixture
def service(repo):
    return TaskService(repo)

@pytest.fixture
def resolver(hasher):
    return IdentityResolver(hasher, min_length=4, max_owners=50, timeout_seconds=None)

@pytest.fixture
def cache(tmp_path):
    return LocalCredentialCache(tmp_path / "taskvault" / "auth.json")

@pytest.fixture
def client(database, hasher):
    s = Settings(DATABASE_URL="sqlite://", MAX_OWNER_SCAN=50, _env_file=None)
    app = create_app(settings=s, database=database, hasher=hasher)
    with TestClient(app) as c:
        yield c

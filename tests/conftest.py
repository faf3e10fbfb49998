import io

import pytest
from aiohttp.test_utils import TestServer
from rich.console import Console

from cmpdl.api.client import CatalogClient
from cmpdl.cli.progress_manager import ProgressManager
from cmpdl.media.downloader import close_connection_pool
from cmpdl.models.config import InstallConfig

from .fake_catalog import FakeCatalog


@pytest.fixture
async def fake_catalog():
    catalog = FakeCatalog()
    server = TestServer(catalog.build_app())
    await server.start_server()
    catalog.base_url = str(server.make_url("/")).rstrip("/")
    catalog.populate()
    yield catalog
    await server.close()


@pytest.fixture
async def close_download_pool():
    yield
    await close_connection_pool()


@pytest.fixture
def install_config(fake_catalog, tmp_path):
    return InstallConfig(
        api_base_url=fake_catalog.api_base_url,
        web_base_url=fake_catalog.base_url,
        page_size=2,
        output_dir=tmp_path,
    )


@pytest.fixture
async def api_client(fake_catalog):
    client = CatalogClient(fake_catalog.api_base_url, "cmpdl-tests", page_size=2)
    yield client
    await client.close()


@pytest.fixture
async def web_client(fake_catalog):
    client = CatalogClient(fake_catalog.base_url, "cmpdl-tests")
    yield client
    await client.close()


@pytest.fixture
def quiet_progress():
    return ProgressManager(Console(file=io.StringIO()), enabled=False)

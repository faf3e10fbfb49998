import io
import json

import pytest
from rich.console import Console

from cmpdl.cli.progress_manager import ProgressManager
from cmpdl.exceptions import ArchiveError, DownloadError, ManifestError
from cmpdl.media import Downloader, copy_overrides, extract_archive, load_manifest
from cmpdl.models.records import DownloadTask

from .fake_catalog import (
    JEI_ID,
    MEKANISM_ID,
    MOD_FILES,
    build_modpack_zip,
    download_path,
)

pytestmark = pytest.mark.usefixtures("close_download_pool")


async def test_extract_and_load_manifest(tmp_path):
    archive = tmp_path / "pack.zip"
    archive.write_bytes(build_modpack_zip())

    await extract_archive(archive, tmp_path / "extracted")
    manifest = load_manifest(tmp_path / "extracted" / "manifest.json")

    assert manifest.minecraft.version == "1.16.5"
    assert len(manifest.files) == 3
    assert (tmp_path / "extracted" / "overrides" / "options.txt").is_file()


async def test_extract_corrupt_archive(tmp_path):
    archive = tmp_path / "pack.zip"
    archive.write_bytes(b"this is not a zip file")

    with pytest.raises(ArchiveError):
        await extract_archive(archive, tmp_path / "extracted")


async def test_load_manifest_missing(tmp_path):
    with pytest.raises(ManifestError, match="no manifest.json"):
        load_manifest(tmp_path / "manifest.json")


@pytest.mark.parametrize(
    "content", ["{not json", json.dumps({"files": []}), json.dumps([1, 2])]
)
async def test_load_manifest_invalid(tmp_path, content):
    path = tmp_path / "manifest.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ManifestError):
        load_manifest(path)


async def test_copy_overrides_merges_and_replaces(tmp_path):
    source = tmp_path / "overrides"
    (source / "config").mkdir(parents=True)
    (source / "config" / "a.cfg").write_text("new")
    (source / "options.txt").write_text("lang:en_us")
    destination = tmp_path / ".minecraft"
    (destination / "config").mkdir(parents=True)
    (destination / "config" / "a.cfg").write_text("old")
    (destination / "mods").mkdir()

    copied = await copy_overrides(source, destination)

    assert copied == 2
    assert (destination / "config" / "a.cfg").read_text() == "new"
    assert (destination / "options.txt").read_text() == "lang:en_us"
    assert (destination / "mods").is_dir()


async def test_copy_overrides_missing_source(tmp_path):
    with pytest.raises(ManifestError):
        await copy_overrides(tmp_path / "overrides", tmp_path / ".minecraft")


async def test_download_streams_to_destination(fake_catalog, tmp_path):
    name, body = MOD_FILES[(JEI_ID, 1001)]
    task = DownloadTask(
        f"{fake_catalog.base_url}{download_path(JEI_ID, 1001)}", tmp_path / name, name
    )
    downloader = Downloader("cmpdl-tests", chunk_size=1024)

    size = await downloader.download(task)

    assert size == len(body)
    assert (tmp_path / name).read_bytes() == body


async def test_download_overwrites_existing_file(fake_catalog, tmp_path):
    name, body = MOD_FILES[(JEI_ID, 1003)]
    (tmp_path / name).write_bytes(b"stale" * 1000)
    task = DownloadTask(
        f"{fake_catalog.base_url}{download_path(JEI_ID, 1003)}", tmp_path / name, name
    )

    await Downloader("cmpdl-tests").download(task)

    assert (tmp_path / name).read_bytes() == body


async def test_download_http_error(fake_catalog, tmp_path):
    task = DownloadTask(
        f"{fake_catalog.base_url}/projects/1/download/2/file", tmp_path / "x.jar", "x.jar"
    )

    with pytest.raises(DownloadError, match="x.jar"):
        await Downloader("cmpdl-tests").download(task)
    assert not (tmp_path / "x.jar").exists()


async def test_download_prints_finished_line(fake_catalog, tmp_path):
    name, _ = MOD_FILES[(JEI_ID, 1001)]
    task = DownloadTask(
        f"{fake_catalog.base_url}{download_path(JEI_ID, 1001)}", tmp_path / name, name
    )
    output = io.StringIO()

    async with ProgressManager(Console(file=output, width=200)) as progress:
        await Downloader("cmpdl-tests").download(task, progress, "(1/3) ")

    printed = output.getvalue()
    assert "(1/3) " + name in printed
    assert "100%" in printed
    assert not progress.progress.tasks


async def test_download_without_content_length(fake_catalog, tmp_path):
    name, body = MOD_FILES[(MEKANISM_ID, 2002)]
    task = DownloadTask(
        f"{fake_catalog.base_url}/projects/{MEKANISM_ID}/stream/2002/file",
        tmp_path / name,
        name,
    )
    output = io.StringIO()

    async with ProgressManager(Console(file=output, width=200)) as progress:
        size = await Downloader("cmpdl-tests", chunk_size=1024).download(
            task, progress, "(2/3) "
        )

    assert size == len(body)
    assert (tmp_path / name).read_bytes() == body
    printed = output.getvalue()
    assert "(2/3) " + name in printed
    assert "100%" in printed
    assert f"{len(body) // 1024}KB/{len(body) // 1024}KB" in printed

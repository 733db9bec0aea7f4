"""Tests for files module.

Uses respx to mock HTTP requests for remote files.
"""

import hashlib

import httpx
import pytest
import respx

from go_lambda_builder.files import (
    DownloadError,
    FileBlob,
    FileFsRef,
    FileRef,
    download,
    fetch_to_path,
    glob,
)

REMOTE_URL = "https://files.example.com/handler.go"
REMOTE_BODY = b"package main\n"


class TestFetchToPath:
    """Tests for fetch_to_path function."""

    @respx.mock
    def test_successful_download(self, tmp_path):
        """Should stream the body to disk and return its digest."""
        respx.get(REMOTE_URL).mock(
            return_value=httpx.Response(200, content=REMOTE_BODY)
        )
        dest = tmp_path / "handler.go"

        with httpx.Client() as client:
            digest = fetch_to_path(client, REMOTE_URL, dest)

        assert dest.read_bytes() == REMOTE_BODY
        assert digest == hashlib.sha256(REMOTE_BODY).hexdigest()

    @respx.mock
    def test_digest_verified(self, tmp_path):
        """Should accept content matching the expected digest."""
        respx.get(REMOTE_URL).mock(
            return_value=httpx.Response(200, content=REMOTE_BODY)
        )
        expected = hashlib.sha256(REMOTE_BODY).hexdigest().upper()

        with httpx.Client() as client:
            fetch_to_path(client, REMOTE_URL, tmp_path / "f", expected)

        assert (tmp_path / "f").exists()

    @respx.mock
    def test_digest_mismatch(self, tmp_path):
        """Should raise and remove the partial file on mismatch."""
        respx.get(REMOTE_URL).mock(
            return_value=httpx.Response(200, content=REMOTE_BODY)
        )
        dest = tmp_path / "f"

        with httpx.Client() as client:
            with pytest.raises(DownloadError) as exc_info:
                fetch_to_path(client, REMOTE_URL, dest, "0" * 64)

        assert exc_info.value.code == "digest_mismatch"
        assert not dest.exists()

    @respx.mock
    def test_http_error(self, tmp_path):
        """Should raise DownloadError with http_error code."""
        respx.get(REMOTE_URL).mock(return_value=httpx.Response(404))

        with httpx.Client() as client:
            with pytest.raises(DownloadError) as exc_info:
                fetch_to_path(client, REMOTE_URL, tmp_path / "f")

        assert exc_info.value.code == "http_error"
        assert "404" in str(exc_info.value)

    @respx.mock
    def test_timeout(self, tmp_path):
        """Should raise DownloadError with timeout code."""
        respx.get(REMOTE_URL).mock(side_effect=httpx.ReadTimeout("slow"))

        with httpx.Client() as client:
            with pytest.raises(DownloadError) as exc_info:
                fetch_to_path(client, REMOTE_URL, tmp_path / "f")

        assert exc_info.value.code == "timeout"

    @respx.mock
    def test_network_error(self, tmp_path):
        """Should raise DownloadError with network_error code."""
        respx.get(REMOTE_URL).mock(side_effect=httpx.ConnectError("refused"))

        with httpx.Client() as client:
            with pytest.raises(DownloadError) as exc_info:
                fetch_to_path(client, REMOTE_URL, tmp_path / "f")

        assert exc_info.value.code == "network_error"


class TestDownload:
    """Tests for download function."""

    def test_materializes_blobs(self, tmp_path):
        """Should write every logical path under dest."""
        files = {
            "api/index.go": FileBlob(b"package main\n"),
            "go.mod": FileBlob(b"module x\n"),
        }

        result = download(files, tmp_path / "out")

        assert (tmp_path / "out" / "api" / "index.go").read_bytes() == b"package main\n"
        assert result["go.mod"].fs_path == tmp_path / "out" / "go.mod"

    def test_applies_mode(self, tmp_path):
        """Should chmod written files to their declared mode."""
        result = download({"run.sh": FileBlob(b"#!/bin/sh\n", mode=0o755)}, tmp_path)

        assert result["run.sh"].fs_path.stat().st_mode & 0o777 == 0o755
        assert result["run.sh"].mode == 0o755

    def test_copies_fs_refs(self, tmp_path):
        """Should copy on-disk files."""
        source = tmp_path / "source.go"
        source.write_bytes(b"package lib\n")

        result = download({"lib/lib.go": FileFsRef(source)}, tmp_path / "out")

        assert result["lib/lib.go"].read_bytes() == b"package lib\n"

    @respx.mock
    def test_fetches_remote_files(self, tmp_path):
        """Should fetch FileRef entries with the given client."""
        respx.get(REMOTE_URL).mock(
            return_value=httpx.Response(200, content=REMOTE_BODY)
        )

        with httpx.Client() as client:
            result = download({"index.go": FileRef(REMOTE_URL)}, tmp_path, client)

        assert result["index.go"].read_bytes() == REMOTE_BODY

    @respx.mock
    def test_remote_files_verify_digest(self, tmp_path):
        """Should reject remote content that does not match its digest."""
        respx.get(REMOTE_URL).mock(
            return_value=httpx.Response(200, content=REMOTE_BODY)
        )
        files = {"index.go": FileRef(REMOTE_URL, digest="0" * 64)}

        with pytest.raises(DownloadError) as exc_info:
            download(files, tmp_path / "out")

        assert exc_info.value.code == "digest_mismatch"
        assert not (tmp_path / "out" / "index.go").exists()

    def test_remote_files_are_not_read_directly(self):
        """Should only expose remote content through a download."""
        assert not hasattr(FileRef(REMOTE_URL), "read_bytes")

    def test_rejects_path_traversal(self, tmp_path):
        """Should refuse logical paths escaping dest."""
        with pytest.raises(DownloadError) as exc_info:
            download({"../escape.go": FileBlob(b"")}, tmp_path / "out")

        assert exc_info.value.code == "path_traversal"


class TestGlob:
    """Tests for glob function."""

    def test_recursive_pattern(self, tmp_path):
        """Should list every file below base for `**`."""
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "b.txt").write_text("b")
        (tmp_path / "c.txt").write_text("c")

        result = glob("**", tmp_path)

        assert list(result) == ["a/b.txt", "c.txt"]
        assert result["c.txt"].fs_path == tmp_path / "c.txt"

    def test_directory_pattern(self, tmp_path):
        """Should expand a `dir/**` pattern to the files below dir."""
        (tmp_path / "static" / "css").mkdir(parents=True)
        (tmp_path / "static" / "css" / "site.css").write_text("body{}")
        (tmp_path / "static" / "index.html").write_text("<html>")
        (tmp_path / "other.txt").write_text("x")

        result = glob("static/**", tmp_path)

        assert sorted(result) == ["static/css/site.css", "static/index.html"]

    def test_plain_pattern_skips_directories(self, tmp_path):
        """Should only return files for non-recursive patterns."""
        (tmp_path / "data").mkdir()
        (tmp_path / "data.json").write_text("{}")

        result = glob("data*", tmp_path)

        assert list(result) == ["data.json"]

    def test_records_mode(self, tmp_path):
        """Should carry the on-disk permission bits."""
        path = tmp_path / "handler"
        path.write_bytes(b"\x7fELF")
        path.chmod(0o755)

        assert glob("**", tmp_path)["handler"].mode == 0o755

    def test_missing_base(self, tmp_path):
        """Should return nothing for a missing directory."""
        assert glob("**", tmp_path / "missing") == {}

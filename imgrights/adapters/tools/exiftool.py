"""
ExifTool adapter for reading and writing metadata.
"""
import os
import asyncio
import subprocess
import json
import shutil
import re
from typing import Optional, List, Dict, Any, Tuple
from pathlib import Path

from ...shared import Result, ErrorCode, get_logger

logger = get_logger(__name__)

_TAG_SAFE_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_:-]*$")


def _decode_bytes_best_effort(blob: Optional[bytes]) -> Tuple[str, bool]:
    """
    Decode subprocess bytes robustly across Windows code pages.

    Returns:
      (text, had_replacement_chars)
    """
    if blob is None:
        return "", False
    if not isinstance(blob, (bytes, bytearray)):
        text = str(blob)
        return text, ("\ufffd" in text)

    raw = bytes(blob)
    if not raw:
        return "", False

    for enc in ("utf-8", "utf-8-sig"):
        try:
            return raw.decode(enc, errors="strict"), False
        except UnicodeDecodeError:
            pass

    # Windows consoles may emit stderr in the local code page.
    try:
        return raw.decode("cp1252", errors="strict"), False
    except UnicodeDecodeError:
        pass

    utf_text = raw.decode("utf-8", errors="replace")
    return utf_text, "\ufffd" in utf_text


def _is_safe_exiftool_tag(tag: str) -> bool:
    """
    Return True if a tag name looks safe to pass to ExifTool as `-TAG` / `-TAG=...`.

    Accepts group prefixes (`XMP:Creator`, `XMP-dc:Rights`), dashes and
    underscores. Whitespace, control characters and a leading dash are
    rejected so a tag can never turn into an extra option.
    """
    if not tag or not isinstance(tag, str):
        return False
    s = tag.strip()
    if not s or s.startswith("-"):
        return False
    return bool(_TAG_SAFE_PATTERN.match(s))


def _validate_exiftool_tags(tags: Optional[List[str]]) -> Result[List[str]]:
    """
    Validate a tag list and return a cleaned list, or Err on any invalid tag.
    """
    if tags is None:
        return Result.Ok([])
    if not isinstance(tags, (list, tuple)):
        return Result.Err(ErrorCode.INVALID_INPUT, "tags must be a list")

    cleaned: List[str] = []
    invalid: List[str] = []
    for t in tags:
        if not isinstance(t, str) or not _is_safe_exiftool_tag(t):
            invalid.append(str(t))
            continue
        cleaned.append(t.strip())

    if invalid:
        return Result.Err(
            ErrorCode.INVALID_INPUT,
            "Invalid ExifTool tag format",
            invalid_tags=invalid,
        )
    return Result.Ok(cleaned)


class ExifTool:
    """
    ExifTool wrapper for metadata operations.

    Never raises exceptions - always returns Result.
    """

    def __init__(
        self,
        bin_name: str = "exiftool",
        timeout: Optional[float] = None,
        trusted_dirs: str = "",
    ):
        """
        Initialize ExifTool adapter.

        Args:
            bin_name: ExifTool binary name or path
            timeout: Per-command timeout in seconds (None or 0 waits forever)
            trusted_dirs: os.pathsep-separated directories the binary must live under
        """
        self.bin = bin_name
        self.timeout = float(timeout) if timeout else None
        self.trusted_dirs = trusted_dirs or ""
        self._available = self._check_available()

    def _resolve_executable(self, bin_name: str) -> Optional[str]:
        """
        Resolve and validate the exiftool executable.

        Only a real exiftool binary is accepted, never an arbitrary command
        string taken from configuration.
        """
        raw = (bin_name or "").strip()
        if not self._is_safe_executable_name(raw):
            return None
        resolved = self._resolve_executable_path(raw)
        if not resolved:
            return None
        if not self._is_under_trusted_dirs(resolved, self.trusted_dirs):
            return None
        return resolved if self._looks_like_exiftool_name(resolved) else None

    @staticmethod
    def _is_safe_executable_name(raw: str) -> bool:
        if not raw:
            return False
        if "\x00" in raw or "\n" in raw or "\r" in raw:
            return False
        return not any(ch in raw for ch in ("&", "|", ";", ">", "<"))

    @staticmethod
    def _resolve_executable_path(raw: str) -> Optional[str]:
        resolved = shutil.which(raw)
        if resolved:
            return resolved
        try:
            candidate = Path(raw)
            if candidate.is_file():
                return str(candidate.resolve(strict=True))
        except (OSError, RuntimeError, ValueError):
            return None
        return None

    @staticmethod
    def _is_under_trusted_dirs(resolved: str, trusted_dirs_raw: str) -> bool:
        if not trusted_dirs_raw.strip():
            return True
        roots: List[Path] = []
        for item in trusted_dirs_raw.split(os.pathsep):
            item = item.strip()
            if not item:
                continue
            try:
                roots.append(Path(item).expanduser().resolve(strict=True))
            except (OSError, RuntimeError):
                logger.debug("Ignoring unresolvable trusted dir: %s", item)
        if not roots:
            return True
        try:
            resolved_path = Path(resolved).resolve(strict=True)
        except (OSError, RuntimeError):
            return False
        return any(resolved_path == root or root in resolved_path.parents for root in roots)

    @staticmethod
    def _looks_like_exiftool_name(resolved: str) -> bool:
        return Path(resolved).name.lower().startswith("exiftool")

    def _check_available(self) -> bool:
        """Check if ExifTool is available in PATH."""
        resolved = self._resolve_executable(self.bin)
        if not resolved:
            return False
        self.bin = resolved
        return True

    def is_available(self) -> bool:
        """Check if ExifTool is available."""
        return self._available

    @staticmethod
    def _validate_path(path: str) -> Result[str]:
        if not path or "\x00" in str(path):
            return Result.Err(ErrorCode.INVALID_INPUT, "Invalid file path")
        p = Path(str(path))
        if not p.exists() or not p.is_file():
            return Result.Err(ErrorCode.NOT_FOUND, f"File not found: {path}")
        return Result.Ok(str(path))

    @staticmethod
    def _append_target_args(cmd: List[str], path: str) -> Tuple[List[str], Optional[str]]:
        """Add the file argument; on Windows the path goes through stdin as UTF-8."""
        if os.name == "nt":
            cmd.extend(["-charset", "filename=utf8", "-@", "-"])
            return cmd, f"{path}\r\n"
        cmd.append(path)
        return cmd, None

    def _run(self, cmd: List[str], stdin_input: Optional[str] = None) -> subprocess.CompletedProcess:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=False,
            check=False,
            timeout=self.timeout,
            input=(stdin_input.encode("utf-8", errors="replace") if stdin_input is not None else None),
            shell=False,
        )

    def _build_read_command(
        self,
        path: str,
        safe_tags: List[str],
        safe_exclude: List[str],
    ) -> Tuple[List[str], Optional[str]]:
        cmd = [self.bin, "-j", "-s"]
        cmd.extend(f"-{tag}" for tag in safe_tags)
        cmd.extend(f"--{tag}" for tag in safe_exclude)
        return self._append_target_args(cmd, path)

    @staticmethod
    def _parse_read_process(process: subprocess.CompletedProcess, path: str) -> Result[Dict[str, Any]]:
        stdout, stdout_rep = _decode_bytes_best_effort(process.stdout)
        stderr, stderr_rep = _decode_bytes_best_effort(process.stderr)
        had_replacements = bool(stdout_rep or stderr_rep)
        if had_replacements:
            logger.warning("ExifTool output contained decoding replacement characters for %s", path)

        if process.returncode != 0:
            stderr_msg = stderr.strip()
            logger.warning("ExifTool error for %s: %s", path, stderr_msg)
            return Result.Err(
                ErrorCode.EXIFTOOL_ERROR,
                stderr_msg or "ExifTool command failed",
                return_code=int(process.returncode),
            )

        if not stdout.strip():
            return Result.Err(ErrorCode.PARSE_ERROR, "ExifTool returned empty output")
        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as exc:
            logger.error("ExifTool JSON parse error for %s: %s", path, exc)
            return Result.Err(ErrorCode.PARSE_ERROR, f"Failed to parse ExifTool output: {exc}")
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            return Result.Err(ErrorCode.PARSE_ERROR, "No metadata found")
        if not data[0].get("SourceFile"):
            return Result.Err(ErrorCode.PARSE_ERROR, "ExifTool result missing SourceFile field")
        return Result.Ok(data[0], degraded=had_replacements)

    def read(
        self,
        path: str,
        tags: Optional[List[str]] = None,
        exclude: Optional[List[str]] = None,
    ) -> Result[Dict[str, Any]]:
        """
        Read metadata from file using ExifTool.

        Args:
            path: File path
            tags: Tags to request (`-TAG`), e.g. ["All"]
            exclude: Tags to leave out (`--TAG`), e.g. ["XMP:XMP"]

        Returns:
            Result with the tag dict (always carries `SourceFile`) or error
        """
        if not self._available:
            return Result.Err(ErrorCode.TOOL_MISSING, "ExifTool not found in PATH")
        path_res = self._validate_path(path)
        if not path_res.ok:
            return Result.Err(path_res.code, path_res.error or "Invalid file path")
        tags_res = _validate_exiftool_tags(tags)
        if not tags_res.ok:
            return Result.Err(tags_res.code, tags_res.error or "Invalid tags", **tags_res.meta)
        exclude_res = _validate_exiftool_tags(exclude)
        if not exclude_res.ok:
            return Result.Err(exclude_res.code, exclude_res.error or "Invalid tags", **exclude_res.meta)

        cmd, stdin_input = self._build_read_command(path, tags_res.data or [], exclude_res.data or [])
        try:
            process = self._run(cmd, stdin_input)
            return self._parse_read_process(process, path)
        except subprocess.TimeoutExpired:
            logger.error("ExifTool timeout for %s", path)
            return Result.Err(ErrorCode.TIMEOUT, f"ExifTool timeout after {self.timeout}s")
        except OSError as e:
            logger.error("ExifTool could not be started: %s", e)
            return Result.Err(ErrorCode.EXIFTOOL_ERROR, str(e))

    def write(self, path: str, metadata: dict, overwrite_original: bool = True) -> Result[bool]:
        """
        Write metadata to file using ExifTool.

        Args:
            path: File path
            metadata: Tag name -> value; a None value clears the tag
            overwrite_original: Replace the file in place without keeping a backup

        Returns:
            Result with success boolean
        """
        if not self._available:
            return Result.Err(ErrorCode.TOOL_MISSING, "ExifTool not found in PATH")
        path_res = self._validate_path(path)
        if not path_res.ok:
            return Result.Err(path_res.code, path_res.error or "Invalid file path")

        invalid_keys = self._invalid_write_keys(metadata)
        if invalid_keys:
            return Result.Err(
                ErrorCode.INVALID_INPUT,
                "Invalid ExifTool tag format",
                invalid_tags=invalid_keys,
            )

        cmd, stdin_input = self._build_write_command(path, metadata, overwrite_original)
        try:
            process = self._run(cmd, stdin_input)
            return self._handle_write_process_result(process, path)
        except subprocess.TimeoutExpired:
            logger.error("ExifTool write timeout for %s", path)
            return Result.Err(ErrorCode.TIMEOUT, f"ExifTool write timeout after {self.timeout}s")
        except OSError as e:
            logger.error("ExifTool write error: %s", e)
            return Result.Err(ErrorCode.EXIFTOOL_ERROR, str(e))

    @staticmethod
    def _invalid_write_keys(metadata: dict) -> List[str]:
        return [str(key) for key in (metadata or {}) if not isinstance(key, str) or not _is_safe_exiftool_tag(key)]

    def _build_write_command(
        self,
        path: str,
        metadata: dict,
        overwrite_original: bool,
    ) -> Tuple[List[str], Optional[str]]:
        cmd = [self.bin]
        for key, value in (metadata or {}).items():
            if value is None:
                cmd.append(f"-{key.strip()}=")
            else:
                cmd.append(f"-{key.strip()}={value}")
        if overwrite_original:
            cmd.append("-overwrite_original")
        return self._append_target_args(cmd, path)

    @staticmethod
    def _handle_write_process_result(process: subprocess.CompletedProcess, path: str) -> Result[bool]:
        _, stdout_rep = _decode_bytes_best_effort(process.stdout)
        stderr, stderr_rep = _decode_bytes_best_effort(process.stderr)
        if stdout_rep or stderr_rep:
            logger.warning("ExifTool write output contained decoding replacement characters for %s", path)
        if process.returncode != 0:
            stderr_msg = stderr.strip()
            logger.warning("ExifTool write error for %s: %s", path, stderr_msg)
            return Result.Err(
                ErrorCode.EXIFTOOL_ERROR,
                stderr_msg or "ExifTool write failed",
                return_code=int(process.returncode),
            )
        logger.debug("Metadata written to %s", path)
        return Result.Ok(True)

    async def aread(
        self,
        path: str,
        tags: Optional[List[str]] = None,
        exclude: Optional[List[str]] = None,
    ) -> Result[Dict[str, Any]]:
        """Async wrapper for read() executed off the event loop thread."""
        return await asyncio.to_thread(self.read, path, tags, exclude)

    async def awrite(self, path: str, metadata: dict, overwrite_original: bool = True) -> Result[bool]:
        """Async wrapper for write() executed off the event loop thread."""
        return await asyncio.to_thread(self.write, path, metadata, overwrite_original)

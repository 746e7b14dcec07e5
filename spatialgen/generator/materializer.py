"""Writing (or previewing) generated files.

:class:`FileMaterializer` turns the :class:`FileArtifact` list produced by a
template provider into files below the project root. It never overwrites an
existing file, writes each file through a temporary sibling so no partial
file is left behind, and stops at the first failure. Files written earlier
in the same sequence stay on disk: multi-file generation is not a
transaction.

In dry-run mode nothing touches the filesystem; each artifact is previewed
instead.
"""

from __future__ import annotations

import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, Field, field_validator

from spatialgen.errors import AlreadyExistsError, WriteError
from spatialgen.utils import Reporter

PREVIEW_LINES = 20


class FileArtifact(BaseModel):
    """One file a generator wants to create."""

    path: str = Field(..., description="Path relative to the project root, '/'-separated")
    content: str = Field(..., description="Full file content")
    kind: str = Field(..., description="Human-readable label used in messages")

    @field_validator("path")
    @classmethod
    def _relative_path(cls, value: str) -> str:
        posix = PurePosixPath(value.replace("\\", "/"))
        if not value or posix.is_absolute() or ".." in posix.parts:
            raise ValueError(f"artifact path must be relative to the project root: {value!r}")
        return str(posix)


@dataclass(frozen=True)
class FilePreview:
    """What a dry run shows for one artifact."""

    path: str
    kind: str
    line_count: int
    size: int
    lines: list[tuple[int, str]] = field(default_factory=list)
    remaining: int = 0


def build_preview(artifact: FileArtifact) -> FilePreview:
    """Summarise *artifact*: counts plus the first 20 numbered lines."""
    lines = artifact.content.split("\n")
    shown = lines[:PREVIEW_LINES]
    return FilePreview(
        path=artifact.path,
        kind=artifact.kind,
        line_count=artifact.content.count("\n") + 1,
        size=len(artifact.content.encode("utf-8")),
        lines=[(index + 1, text) for index, text in enumerate(shown)],
        remaining=max(len(lines) - PREVIEW_LINES, 0),
    )


class FileMaterializer:
    """Creates or previews generated files below *project_root*."""

    def __init__(
        self,
        project_root: str | Path,
        reporter: Reporter | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self.project_root = Path(project_root)
        self.reporter = reporter or Reporter()
        self.dry_run = dry_run

    def target_path(self, artifact: FileArtifact) -> Path:
        """Absolute location of *artifact* on disk."""
        return self.project_root.joinpath(*PurePosixPath(artifact.path).parts)

    # -- Preview -----------------------------------------------------------

    def preview_file(self, artifact: FileArtifact) -> FilePreview:
        """Print and return the preview of *artifact*; never touches the disk."""
        preview = build_preview(artifact)
        self.reporter.preview(preview)
        return preview

    # -- Creation ----------------------------------------------------------

    def create_file(self, artifact: FileArtifact) -> Path:
        """Create one file, or preview it in dry-run mode.

        Returns:
            The absolute target path.

        Raises:
            AlreadyExistsError: A file is already present at the target.
            WriteError: Creating directories or writing the file failed.
        """
        target = self.target_path(artifact)

        if self.dry_run:
            self.preview_file(artifact)
            return target

        if target.exists():
            raise AlreadyExistsError(target, artifact.kind)

        try:
            atomic_write(target, artifact.content)
        except OSError as exc:
            raise WriteError(target, artifact.kind, exc.strerror or str(exc)) from exc

        self.reporter.success(f"Created {artifact.kind}: {artifact.path}")
        return target

    def create_files(self, artifacts: list[FileArtifact]) -> list[Path]:
        """Create *artifacts* in order, stopping at the first failure.

        In dry-run mode every artifact is previewed and the call always
        succeeds.

        Returns:
            Target paths, in order. In dry-run mode these were not written.

        Raises:
            AlreadyExistsError | WriteError: The first failure, with
                ``written`` listing the files created before it. Those files
                are not removed.
        """
        if self.dry_run:
            self.reporter.warning("DRY RUN MODE - No files will be created")
            self.reporter.line()

        written: list[Path] = []
        for artifact in artifacts:
            try:
                written.append(self.create_file(artifact))
            except (AlreadyExistsError, WriteError) as exc:
                exc.written = list(written)
                raise

        if self.dry_run:
            self.reporter.note("Dry run complete. Run without --dry-run to create files.")

        return written


def atomic_write(target: Path, content: str) -> None:
    """Write *content* to a temporary sibling, then rename it into place.

    The result keeps the mode of the file it replaces; a new file gets the
    usual umask-derived mode rather than the 0600 of the temporary file.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    mode = stat.S_IMODE(target.stat().st_mode) if target.exists() else _default_file_mode()
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _default_file_mode() -> int:
    """``0o666`` masked by the process umask (``0o644`` under umask 022)."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask

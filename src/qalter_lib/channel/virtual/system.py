# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self

import yaml

from qalter_lib.core.common import load_yaml_loader
from qalter_lib.core.config import CFG
from qalter_lib.properties.attributes import AttributeEdit


class VirtualServerError(Exception):
    """
    Common exception type for errors reported by virtual servers.

    Attributes:
        code (int): Error code reported by the virtual server.
        rejected (list[tuple[AttributeEdit, int, str]]): Attribute edits refused by the server.
    """

    def __init__(
        self,
        message: str,
        code: int,
        rejected: list[tuple[AttributeEdit, int, str]] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.rejected = rejected or []


@dataclass
class VirtualJob:
    """A job stored on a virtual server."""

    job_id: str
    attributes: dict[str, str] = field(default_factory=dict)
    resources: dict[str, str] = field(default_factory=dict)

    def apply(self, edit: AttributeEdit) -> None:
        """Apply a single attribute edit to the job."""
        if edit.resource is not None:
            self.resources[edit.resource] = edit.value
        else:
            self.attributes[edit.name] = edit.value


@dataclass
class VirtualServer:
    """
    A virtual batch server.

    Attributes:
        name (str): Name of the server.
        jobs (dict[str, VirtualJob]): Jobs managed by the server.
        moved (dict[str, str]): Jobs that moved to another server, mapped to that server.
        rejected (dict[str, tuple[int, str]]): Attributes (or `Resource_List.<resource>`)
            refused by the server, mapped to the error code and message.
        reachable (bool): Whether connections to the server succeed.
    """

    name: str
    jobs: dict[str, VirtualJob] = field(default_factory=dict)
    moved: dict[str, str] = field(default_factory=dict)
    rejected: dict[str, tuple[int, str]] = field(default_factory=dict)
    reachable: bool = True

    def alterJob(self, job_id: str, edits: Sequence[AttributeEdit]) -> None:
        """
        Alter the attributes of a job. Nothing is changed if any edit is refused.

        Raises:
            VirtualServerError: If the job is unknown or any edit is refused.
        """
        if not (job := self.jobs.get(job_id)):
            raise VirtualServerError("Unknown Job Id", CFG.error_codes.unknown_job_id)

        refused = []
        for edit in edits:
            key = (
                f"{edit.name}.{edit.resource}" if edit.resource is not None else edit.name
            )
            if (rule := self.rejected.get(key) or self.rejected.get(edit.name)) is not None:
                code, message = rule
                refused.append((edit, code, message))

        if refused:
            raise VirtualServerError(refused[0][2], refused[0][1], refused)

        for edit in edits:
            job.apply(edit)


class VirtualServerSystem:
    """
    A collection of virtual batch servers for testing purposes.
    Servers and jobs are stored in dictionaries; jobs can be marked as moved
    to another server so that locating them is exercised.
    """

    def __init__(self, default_server: str | None = None):
        """Initialize an empty system of virtual servers."""
        self.servers: dict[str, VirtualServer] = {}
        self.default_server = default_server

    @classmethod
    def fromFile(cls, path: Path) -> Self:
        """
        Load virtual servers from a YAML file.

        The file has the following structure:

            default_server: alpha
            servers:
              alpha:
                jobs:
                  1.alpha: {Job_Name: test}
                moved:
                  2.alpha: beta
                rejected:
                  Priority: [15014, "Illegal attribute or resource value"]
              beta:
                reachable: false

        Raises:
            VirtualServerError: If the file cannot be read or is malformed.
        """
        try:
            with path.open() as f:
                data = yaml.load(f, Loader=load_yaml_loader()) or {}
            return cls.fromDict(data)
        except (OSError, yaml.YAMLError, TypeError, ValueError, AttributeError) as e:
            raise VirtualServerError(
                f"Could not load virtual servers from '{path}': {e}",
                CFG.error_codes.system,
            ) from e

    @classmethod
    def fromDict(cls, data: dict[str, Any]) -> Self:
        """Create virtual servers from a dictionary (see `fromFile`)."""
        system = cls(data.get("default_server"))
        for name, raw in (data.get("servers") or {}).items():
            raw = raw or {}
            server = system.addServer(name, reachable=raw.get("reachable", True))
            for job_id, attributes in (raw.get("jobs") or {}).items():
                server.jobs[str(job_id)] = VirtualJob(
                    str(job_id), {k: str(v) for k, v in (attributes or {}).items()}
                )
            server.moved.update(
                {str(k): str(v) for k, v in (raw.get("moved") or {}).items()}
            )
            for attr, (code, message) in (raw.get("rejected") or {}).items():
                server.rejected[attr] = (int(code), str(message))

        return system

    def addServer(self, name: str, reachable: bool = True) -> VirtualServer:
        """Register a new virtual server and return it."""
        server = VirtualServer(name, reachable=reachable)
        self.servers[name] = server
        if self.default_server is None:
            self.default_server = name
        return server

    def addJob(self, server: str, job_id: str, **attributes: str) -> VirtualJob:
        """Register a new job on the given virtual server and return it."""
        job = VirtualJob(job_id, dict(attributes))
        self.servers[server].jobs[job_id] = job
        return job

    def moveJob(self, job_id: str, source: str, target: str) -> None:
        """Move a job from one virtual server to another."""
        job = self.servers[source].jobs.pop(job_id)
        self.servers[target].jobs[job_id] = job
        self.servers[source].moved[job_id] = target

    def getServer(self, name: str) -> VirtualServer:
        """
        Return a reachable virtual server.

        Raises:
            VirtualServerError: If the server does not exist or is unreachable.
        """
        # port numbers are irrelevant for virtual servers
        server = self.servers.get(name.split(":")[0])
        if not server or not server.reachable:
            # errno 111 = connection refused
            raise VirtualServerError(f"Server '{name}' is not reachable.", 111)
        return server

    def locateJob(self, job_id: str, server: str) -> str | None:
        """Return the server managing the job according to `server`, if known."""
        try:
            origin = self.getServer(server)
        except VirtualServerError:
            return None

        if job_id in origin.jobs:
            return origin.name
        return origin.moved.get(job_id)


"""Docker-backed sandbox.

Every session is a fresh container created from the language image with no
network, capped memory/cpu/pids and all capabilities dropped. Files are
copied in as a tar archive and commands run through ``docker exec`` wrapped
in coreutils ``timeout``. Their output is streamed and cut off at a byte
cap, so a chatty program cannot flood this process. The container is
force-removed when the session closes, whatever happened inside it.
"""

import io, logging, shlex, tarfile, uuid
from contextlib import contextmanager
from typing import Iterable, Iterator, Sequence

import docker
from docker.errors import DockerException, ImageNotFound
from docker.models.containers import Container
from requests.exceptions import RequestException

from godge.core.config import Settings
from godge.sandbox.base import ExecResult, SandboxError

logger = logging.getLogger(__name__)

SANDBOX_LABEL = "godge.sandbox"


def make_archive(files: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tf:
        for path, content in files.items():
            data = content.encode()
            ti = tarfile.TarInfo(name=path)
            ti.size = len(data)
            ti.mode = 0o644
            tf.addfile(ti, io.BytesIO(data))
    return buf.getvalue()


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


class DockerSession:
    def __init__(
        self, container: Container, workdir: str, time_limit: int, output_limit: int
    ):
        self.container = container
        self.workdir = workdir
        self.output_limit = output_limit
        self.time_limit = time_limit
        self.output_limit = output_limit

    def put_files(self, files: dict[str, str]) -> None:
        try:
            ok = self.container.put_archive(self.workdir, make_archive(files))
        except (DockerException, RequestException) as e:
            raise SandboxError(f"failed to copy files into sandbox: {e}") from e
        if not ok:
            raise SandboxError("failed to copy files into sandbox")

    def exec(
        self,
        command: Sequence[str],
        stdin_file: str | None = None,
        time_limit: int | None = None,
    ) -> ExecResult:
        script = " ".join(shlex.quote(c) for c in command)
        if stdin_file:
            script += f" < {shlex.quote(stdin_file)}"
        limit = time_limit or self.time_limit
        cmd = ["timeout", "-k", "1", str(limit), "sh", "-c", script]
        # same calls as Container.exec_run, but streamed so output is capped here
        api = self.container.client.api
        try:
            exec_id = api.exec_create(
                self.container.id, cmd, stdout=True, stderr=True, workdir=self.workdir
            )["Id"]
            chunks = api.exec_start(exec_id, stream=True, demux=True)
            stdout, stderr, exceeded = self._collect(chunks)
            exit_code = None if exceeded else api.exec_inspect(exec_id)["ExitCode"]
        except (DockerException, RequestException) as e:
            raise SandboxError(f"failed to run command in sandbox: {e}") from e
        if exceeded:
            logger.info(
                "output exceeded %d bytes",
                self.output_limit,
                extra={"container": self.container.name},
            )
        return ExecResult(
            exit_code=exit_code,
            stdout=_decode(bytes(stdout)),
            stderr=_decode(bytes(stderr)),
            output_exceeded=exceeded,
        )

    def _collect(self, chunks: Iterable[tuple]) -> tuple[bytearray, bytearray, bool]:
        stdout, stderr = bytearray(), bytearray()
        for out, err in chunks:
            for buf, data in ((stdout, out), (stderr, err)):
                if not data:
                    continue
                room = self.output_limit - len(stdout) - len(stderr)
                if len(data) > room:
                    buf += data[:room]
                    return stdout, stderr, True
                buf += data
        return stdout, stderr, False


class DockerSandbox:
    def __init__(
        self,
        client: docker.DockerClient,
        time_limit: int = 5,
        mem_limit: str = "256m",
        cpus: str = "0.5",
        pids_limit: int = 64,
        workdir: str = "/work",
        output_limit: int = 1 << 20,
    ):
        self.client = client
        self.time_limit = time_limit
        self.mem_limit = mem_limit
        self.cpus = cpus
        self.pids_limit = pids_limit
        self.workdir = workdir
        self.output_limit = output_limit

    @classmethod
    def from_settings(cls, settings: Settings) -> "DockerSandbox":
        try:
            if settings.DOCKER_URL:
                client = docker.DockerClient(
                    base_url=settings.DOCKER_URL, timeout=settings.DOCKER_TIMEOUT_S
                )
            else:
                client = docker.from_env(timeout=settings.DOCKER_TIMEOUT_S)
        except DockerException as e:
            raise SandboxError(f"failed to connect to docker daemon: {e}") from e
        return cls(
            client,
            time_limit=settings.RUN_TIME_LIMIT_S,
            mem_limit=settings.RUN_MEMORY,
            cpus=settings.RUN_CPUS,
            pids_limit=settings.RUN_PIDS_LIMIT,
            workdir=settings.SANDBOX_WORKDIR,
            output_limit=settings.OUTPUT_LIMIT_BYTES,
        )

    def ping(self) -> None:
        try:
            self.client.ping()
        except (DockerException, RequestException) as e:
            raise SandboxError(f"failed to connect to docker daemon: {e}") from e

    def _create(self, image: str) -> Container:
        return self.client.containers.create(
            image,
            command=["sleep", "infinity"],
            name=f"godge-sandbox-{uuid.uuid4().hex[:12]}",
            detach=True,
            network_disabled=True,
            mem_limit=self.mem_limit,
            memswap_limit=self.mem_limit,
            nano_cpus=int(float(self.cpus) * 1e9),
            pids_limit=self.pids_limit,
            cap_drop=["ALL"],
            security_opt=["no-new-privileges:true"],
            working_dir=self.workdir,
            environment={
                "HOME": "/tmp",
                "GOCACHE": "/tmp/go-cache",
                "PYTHONDONTWRITEBYTECODE": "1",
                "PYTHONUNBUFFERED": "1",
            },
            labels={SANDBOX_LABEL: "1"},
        )

    @contextmanager
    def session(self, image: str) -> Iterator[DockerSession]:
        try:
            container = self._create(image)
        except ImageNotFound as e:
            raise SandboxError(f"image {image} is not available") from e
        except (DockerException, RequestException) as e:
            raise SandboxError(f"failed to create sandbox: {e}") from e
        logger.debug("sandbox %s created from %s", container.name, image)
        try:
            try:
                container.start()
            except (DockerException, RequestException) as e:
                raise SandboxError(f"failed to start sandbox: {e}") from e
            yield DockerSession(
                container, self.workdir, self.time_limit, self.output_limit
            )
        finally:
            try:
                container.remove(force=True)
            except (DockerException, RequestException) as e:
                raise SandboxError(f"failed to remove sandbox {container.name}: {e}") from e
            logger.debug("sandbox %s removed", container.name)

    def cleanup(self) -> int:
        """Force-remove sandboxes left behind by a previous process."""
        removed = 0
        for container in self.client.containers.list(
            all=True, filters={"label": SANDBOX_LABEL}
        ):
            try:
                container.remove(force=True)
                removed += 1
            except DockerException as e:
                logger.warning("Failed to remove container %s: %s", container.name, e)
        return removed

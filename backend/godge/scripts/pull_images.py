from docker.errors import DockerException

from godge.core.config import get_settings
from godge.sandbox.docker_sandbox import DockerSandbox
from godge.tasks.languages import get_languages


def main():
    settings = get_settings()
    sandbox = DockerSandbox.from_settings(settings)
    sandbox.ping()
    images = sorted({lang.image for lang in get_languages(settings).values()})
    failed = 0
    for image in images:
        try:
            sandbox.client.images.pull(image)
            print(f"pulled {image}")
        except DockerException as e:
            failed += 1
            print(f"failed to pull {image}: {e}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())

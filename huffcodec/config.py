from __future__ import annotations
from dataclasses import dataclass
import logging
import os

DEFAULT_ZOOKEEPER_HOSTS = "zk-cs.compression-namespace.svc.cluster.local:2181"
DEFAULT_API_SERVICE_URL = "http://apiservice.compression-namespace.svc.cluster.local:8080"


@dataclass(frozen=True)
class Settings:
    number_of_workers: int = 1
    zookeeper_hosts: str = DEFAULT_ZOOKEEPER_HOSTS
    zookeeper_timeout: float = 30.0
    zookeeper_root: str = "/root"
    api_service_url: str = DEFAULT_API_SERVICE_URL
    input_path: str = "./odyssey.txt"
    worker_files_dir: str = "/tmp/worker-files"
    compressed_file_path: str = "/tmp/compressed_file.bin"
    log_level: str = "INFO"

    @staticmethod
    def from_env(environ=None) -> Settings:
        environ = os.environ if environ is None else environ
        return Settings(
            number_of_workers=int(environ.get("WORKER_NUMBER", 1)),
            zookeeper_hosts=environ.get("ZOOKEEPER_HOSTS", DEFAULT_ZOOKEEPER_HOSTS),
            zookeeper_timeout=float(environ.get("ZOOKEEPER_TIMEOUT", 30)),
            zookeeper_root=environ.get("ZOOKEEPER_ROOT", "/root").rstrip("/"),
            api_service_url=environ.get(
                "API_SERVICE_URL", DEFAULT_API_SERVICE_URL
            ).rstrip("/"),
            input_path=environ.get("INPUT_PATH", "./odyssey.txt"),
            worker_files_dir=environ.get("WORKER_FILES_DIR", "/tmp/worker-files"),
            compressed_file_path=environ.get(
                "COMPRESSED_FILE_PATH", "/tmp/compressed_file.bin"
            ),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(settings: Settings):
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

from __future__ import annotations
from typing import Dict, List
from kazoo.client import KazooClient
from kazoo.recipe.barrier import Barrier
import json
import logging
import time

import requests

from huffcodec.codec import encode_text
from huffcodec.compression import EncodedRecord
from huffcodec.config import Settings, configure_logging
from huffcodec.container import record_to_bytes
from huffcodec.flatten import flatten_tree
from huffcodec.tree import (
    build_frequency_table,
    build_tree_from_frequencies,
    merge_frequency_tables,
)

logger = logging.getLogger(__name__)


class HuffmanWorker:
    """Compresses one slice of a text with a tree shared by every worker.

    Each worker counts its own slice, publishes the counts to ZooKeeper and
    waits on a barrier until all workers have done so. The merged table is the
    same everywhere, so every worker builds the same tree and the encoded
    slices can be concatenated in worker order.
    """

    def __init__(
        self,
        worker_number: int,
        number_of_workers: int,
        zk: KazooClient,
        zk_barrier: Barrier,
        zk_root: str = "/root",
        poll_interval: float = 1.0,
    ):
        self.worker_number = worker_number
        self.number_of_workers = number_of_workers
        self.zk = zk
        self.zk_barrier = zk_barrier
        self.zk_root = zk_root
        self.poll_interval = poll_interval

    @property
    def sub_freq_tables_path(self) -> str:
        return f"{self.zk_root}/sub-freq-tables"

    def get_worker_sub_freq_table_node_path(self, worker_number: int) -> str:
        return f"{self.sub_freq_tables_path}/worker-{worker_number}-sub-freq-table"

    def divide_symbols_among_workers(self, text: str) -> str:
        if len(text) < self.number_of_workers:
            raise ValueError(
                f"cannot split {len(text)} symbols among {self.number_of_workers} workers"
            )
        num_of_symbols_to_count = len(text) // self.number_of_workers
        start_index = (self.worker_number - 1) * num_of_symbols_to_count
        # last worker also takes the remainder
        if self.worker_number == self.number_of_workers:
            end_index = len(text)
        else:
            end_index = self.worker_number * num_of_symbols_to_count
        logger.info(
            "Worker %d processing symbols %d to %d (exclusive) of %d",
            self.worker_number,
            start_index,
            end_index,
            len(text),
        )
        return text[start_index:end_index]

    def publish_sub_freq_table(self, sub_freq_table: Dict[str, int]):
        self.zk.ensure_path(self.sub_freq_tables_path)
        self.zk.create(
            self.get_worker_sub_freq_table_node_path(worker_number=self.worker_number),
            json.dumps(sub_freq_table).encode("utf-8"),
        )

    def wait_for_sub_freq_tables(self):
        if self.worker_number == 1:
            # Leader waits until all workers have counted frequencies to remove the barrier
            logger.info("Leader: waiting for frequency tables to remove barrier")
            while (
                len(self.zk.get_children(self.sub_freq_tables_path))
                < self.number_of_workers
            ):
                time.sleep(self.poll_interval)
            logger.info("Leader: removing barrier")
            self.zk_barrier.remove()
        else:
            logger.info("Worker %d: waiting for barrier removal", self.worker_number)
            self.zk_barrier.wait()

    def collect_sub_freq_tables(
        self, own_sub_freq_table: Dict[str, int]
    ) -> List[Dict[str, int]]:
        list_sub_freq_tables = [own_sub_freq_table]
        for worker_number in range(1, self.number_of_workers + 1):
            if worker_number == self.worker_number:
                continue
            node_path = self.get_worker_sub_freq_table_node_path(
                worker_number=worker_number
            )
            if not self.zk.exists(node_path):
                raise RuntimeError(f"{node_path} does not exist")
            data, _stat = self.zk.get(node_path)
            list_sub_freq_tables.append(json.loads(data.decode("utf-8")))
        return list_sub_freq_tables

    def compress_chunk(self, text: str) -> EncodedRecord:
        chunk = self.divide_symbols_among_workers(text=text)
        sub_freq_table = build_frequency_table(chunk)
        self.publish_sub_freq_table(sub_freq_table=sub_freq_table)
        self.wait_for_sub_freq_tables()
        merged_freq_table = merge_frequency_tables(
            self.collect_sub_freq_tables(own_sub_freq_table=sub_freq_table)
        )
        logger.info(
            "Merged %d sub-frequency tables into %d symbols",
            self.number_of_workers,
            len(merged_freq_table),
        )
        root = build_tree_from_frequencies(freq_table=merged_freq_table)
        shape, leaves = flatten_tree(root)
        return EncodedRecord(
            shape=shape, leaves=leaves, message_bits=encode_text(root, chunk)
        )

    def upload_record(self, record: EncodedRecord, api_service_url: str):
        response = requests.post(
            url=f"{api_service_url}/upload-encoded-chunk",
            files={"upload_file": record_to_bytes(record)},
            data={
                "worker_number": self.worker_number,
                "number_of_workers": self.number_of_workers,
            },
        )
        response.raise_for_status()


def register_worker(zk: KazooClient, settings: Settings, zk_barrier: Barrier) -> int:
    """Claims the next worker index; the first worker also creates the barrier."""
    worker_index_node = f"{settings.zookeeper_root}/worker-index"
    with zk.Lock(path=f"{settings.zookeeper_root}/worker-index-lock"):
        if zk.exists(worker_index_node):
            data, _stat = zk.get(worker_index_node)
            list_workers = json.loads(data.decode("utf-8"))
            if len(list_workers) >= settings.number_of_workers:
                raise RuntimeError(
                    f"{len(list_workers)} workers already registered, "
                    f"expected {settings.number_of_workers}"
                )
            worker_number = len(list_workers) + 1
            list_workers.append(worker_number)
            zk.set(worker_index_node, json.dumps(list_workers).encode("utf-8"))
        else:
            zk.ensure_path(settings.zookeeper_root)
            worker_number = 1
            zk.create(worker_index_node, json.dumps([worker_number]).encode("utf-8"))
            zk_barrier.create()
    logger.info(
        "I am worker %d out of %d workers", worker_number, settings.number_of_workers
    )
    return worker_number


def main():
    settings = Settings.from_env()
    configure_logging(settings)
    zk = KazooClient(
        hosts=settings.zookeeper_hosts, timeout=settings.zookeeper_timeout
    )
    zk.start(timeout=settings.zookeeper_timeout)
    logger.info("Connected to ZooKeeper at %s", settings.zookeeper_hosts)
    try:
        zk_barrier = Barrier(
            client=zk, path=f"{settings.zookeeper_root}/sub-freq-tables-barrier"
        )
        worker = HuffmanWorker(
            worker_number=register_worker(zk, settings, zk_barrier),
            number_of_workers=settings.number_of_workers,
            zk=zk,
            zk_barrier=zk_barrier,
            zk_root=settings.zookeeper_root,
        )
        with open(settings.input_path, "r") as f:
            content = f.read()
        record = worker.compress_chunk(text=content)
        worker.upload_record(record, api_service_url=settings.api_service_url)
    finally:
        zk.stop()
        zk.close()


if __name__ == "__main__":
    main()

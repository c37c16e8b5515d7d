"""Topic route data: which brokers serve a topic and with which queues."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

_DIGITS = "0123456789"


@dataclass
class QueueData:
    """Queue counts and permission of one broker for a topic."""

    broker_name: str = ""
    read_queue_nums: int = 0
    write_queue_nums: int = 0
    perm: int = 0
    topic_syn_flag: int = 0

    def equals(self, other: "QueueData") -> bool:
        return (
            self.broker_name == other.broker_name
            and self.read_queue_nums == other.read_queue_nums
            and self.write_queue_nums == other.write_queue_nums
            and self.perm == other.perm
            and self.topic_syn_flag == other.topic_syn_flag
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "brokerName": self.broker_name,
            "readQueueNums": self.read_queue_nums,
            "writeQueueNums": self.write_queue_nums,
            "perm": self.perm,
            "topicSynFlag": self.topic_syn_flag,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QueueData":
        return cls(
            broker_name=str(data.get("brokerName") or ""),
            read_queue_nums=int(data.get("readQueueNums") or 0),
            write_queue_nums=int(data.get("writeQueueNums") or 0),
            perm=int(data.get("perm") or 0),
            topic_syn_flag=int(data.get("topicSynFlag") or 0),
        )


@dataclass
class BrokerData:
    """A broker group: its cluster, name and addresses by broker id."""

    cluster: str = ""
    broker_name: str = ""
    broker_addresses: dict[int, str] = field(default_factory=dict)

    def equals(self, other: "BrokerData") -> bool:
        if self.cluster != other.cluster or self.broker_name != other.broker_name:
            return False
        if len(self.broker_addresses) != len(other.broker_addresses):
            return False
        return all(
            other.broker_addresses.get(broker_id, "") == addr
            for broker_id, addr in self.broker_addresses.items()
        )

    def to_dict(self) -> dict[str, Any]:
        addresses = sorted(
            ((str(k), v) for k, v in self.broker_addresses.items()), key=lambda kv: kv[0]
        )
        return {
            "cluster": self.cluster,
            "brokerName": self.broker_name,
            "brokerAddrs": dict(addresses),
        }


@dataclass
class TopicRouteData:
    """The route of a topic as reported by a name server."""

    order_topic_conf: str = ""
    queue_data_list: list[QueueData] = field(default_factory=list)
    broker_data_list: list[BrokerData] = field(default_factory=list)

    def clone(self) -> "TopicRouteData":
        """Copy the lists; the queue and broker entries themselves are shared."""
        return TopicRouteData(
            order_topic_conf=self.order_topic_conf,
            queue_data_list=list(self.queue_data_list),
            broker_data_list=list(self.broker_data_list),
        )

    def equals(self, other: "TopicRouteData") -> bool:
        """Compare entry by entry, in list order."""
        if len(self.broker_data_list) != len(other.broker_data_list):
            return False
        if len(self.queue_data_list) != len(other.queue_data_list):
            return False
        if not all(a.equals(b) for a, b in zip(self.broker_data_list, other.broker_data_list)):
            return False
        return all(a.equals(b) for a, b in zip(self.queue_data_list, other.queue_data_list))

    def to_json(self) -> str:
        return json.dumps(
            {
                "OrderTopicConf": self.order_topic_conf,
                "queueDatas": [q.to_dict() for q in self.queue_data_list],
                "brokerDatas": [b.to_dict() for b in self.broker_data_list],
            },
            separators=(",", ":"),
        )

    def __str__(self) -> str:
        return self.to_json()


def _quote_numeric_keys(text: str) -> str:
    """Quote bare integer object keys, as name servers send ``{0:"addr"}``."""
    out = []
    i = 0
    n = len(text)
    in_string = False
    expect_key = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
            expect_key = False
        elif ch in "{,":
            out.append(ch)
            expect_key = True
            i += 1
            continue
        elif expect_key and (ch in _DIGITS or ch == "-"):
            j = i + 1
            while j < n and text[j] in _DIGITS:
                j += 1
            k = j
            while k < n and text[k].isspace():
                k += 1
            if k < n and text[k] == ":":
                out.append('"' + text[i:j] + '"')
                i = j
                expect_key = False
                continue
        if not ch.isspace():
            expect_key = False
        out.append(ch)
        i += 1
    return "".join(out)


def _parse_broker_id(key: str) -> int:
    try:
        return int(key)
    except ValueError:
        return 0


def decode_topic_route_data(data: str | bytes) -> TopicRouteData:
    """Parse a route body; raise ValueError when it is not usable."""
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    try:
        document = json.loads(_quote_numeric_keys(data))
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid route data: {exc}") from exc
    if not isinstance(document, dict):
        raise ValueError("route data is not an object")
    if "queueDatas" not in document:
        raise ValueError("route data has no queueDatas")

    raw_queues = document["queueDatas"] or []
    if not isinstance(raw_queues, list) or not all(isinstance(q, dict) for q in raw_queues):
        raise ValueError("queueDatas is not a list of objects")
    queues = [QueueData.from_dict(q) for q in raw_queues]

    brokers = []
    raw_brokers = document.get("brokerDatas") or []
    if not isinstance(raw_brokers, list):
        raw_brokers = []
    for raw in raw_brokers:
        if not isinstance(raw, dict):
            continue
        addrs = raw.get("brokerAddrs") or {}
        if not isinstance(addrs, dict):
            addrs = {}
        brokers.append(
            BrokerData(
                cluster=str(raw.get("cluster") or ""),
                broker_name=str(raw.get("brokerName") or ""),
                broker_addresses={
                    _parse_broker_id(str(k)): str(v).replace('"', "") for k, v in addrs.items()
                },
            )
        )
    return TopicRouteData(queue_data_list=queues, broker_data_list=brokers)


def topic_route_data_changed(
    old: Optional[TopicRouteData], new: Optional[TopicRouteData]
) -> bool:
    """Whether two routes differ, ignoring the order of their entries."""
    if old is None or new is None:
        return True
    old_sorted = old.clone()
    new_sorted = new.clone()
    for route in (old_sorted, new_sorted):
        route.queue_data_list.sort(key=lambda q: q.broker_name, reverse=True)
        route.broker_data_list.sort(key=lambda b: b.broker_name, reverse=True)
    return not old_sorted.equals(new_sorted)
"""Request codes and the custom headers carried in a command's ext fields."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping

V4_1_0 = 0

DEFAULT_TOPIC = "TBW102"
DEFAULT_TOPIC_QUEUE_NUMS = 4


class RequestCode(enum.IntEnum):
    """Codes of the requests a client sends or receives."""

    SEND_MESSAGE = 10
    PULL_MESSAGE = 11
    QUERY_MESSAGE = 12
    QUERY_CONSUMER_OFFSET = 14
    UPDATE_CONSUMER_OFFSET = 15
    CREATE_TOPIC = 17
    SEARCH_OFFSET_BY_TIMESTAMP = 29
    GET_MAX_OFFSET = 30
    GET_MIN_OFFSET = 31
    VIEW_MESSAGE_BY_ID = 33
    HEART_BEAT = 34
    CONSUMER_SEND_MSG_BACK = 36
    END_TRANSACTION = 37
    GET_CONSUMER_LIST_BY_GROUP = 38
    CHECK_TRANSACTION_STATE = 39
    NOTIFY_CONSUMER_IDS_CHANGED = 40
    LOCK_BATCH_MQ = 41
    UNLOCK_BATCH_MQ = 42
    GET_ROUTE_INFO_BY_TOPIC = 105
    GET_BROKER_CLUSTER_INFO = 106
    GET_ALL_TOPIC_LIST_FROM_NAME_SERVER = 206
    DELETE_TOPIC_IN_BROKER = 215
    DELETE_TOPIC_IN_NAME_SRV = 216
    RESET_CONSUMER_OFFSET = 220
    GET_CONSUMER_RUNNING_INFO = 307
    CONSUME_MESSAGE_DIRECTLY = 309
    SEND_BATCH_MESSAGE = 320


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _int(value: str) -> int:
    try:
        return int(value, 10)
    except ValueError:
        return 0


@dataclass
class SendMessageRequestHeader:
    producer_group: str = ""
    topic: str = ""
    queue_id: int = 0
    sys_flag: int = 0
    born_timestamp: int = 0
    flag: int = 0
    properties: str = ""
    reconsume_times: int = 0
    unit_mode: bool = False
    max_reconsume_times: int = 0
    batch: bool = False
    default_topic: str = ""
    default_topic_queue_nums: int = 0

    def encode(self) -> dict[str, str]:
        return {
            "producerGroup": self.producer_group,
            "topic": self.topic,
            "queueId": str(self.queue_id),
            "sysFlag": str(self.sys_flag),
            "bornTimestamp": str(self.born_timestamp),
            "flag": str(self.flag),
            "reconsumeTimes": str(self.reconsume_times),
            "unitMode": _bool(self.unit_mode),
            "maxReconsumeTimes": str(self.max_reconsume_times),
            "defaultTopic": DEFAULT_TOPIC,
            "defaultTopicQueueNums": str(DEFAULT_TOPIC_QUEUE_NUMS),
            "batch": _bool(self.batch),
            "properties": self.properties,
        }


@dataclass
class SendMessageRequestV2Header(SendMessageRequestHeader):
    """The send header with single-letter keys."""

    @classmethod
    def from_header(cls, header: SendMessageRequestHeader) -> "SendMessageRequestV2Header":
        return cls(**vars(header))

    def encode(self) -> dict[str, str]:
        return {
            "a": self.producer_group,
            "b": self.topic,
            "c": self.default_topic,
            "d": str(self.default_topic_queue_nums),
            "e": str(self.queue_id),
            "f": str(self.sys_flag),
            "g": str(self.born_timestamp),
            "h": str(self.flag),
            "i": self.properties,
            "j": str(self.reconsume_times),
            "k": _bool(self.unit_mode),
            "l": str(self.max_reconsume_times),
            "m": _bool(self.batch),
        }


@dataclass
class EndTransactionRequestHeader:
    producer_group: str = ""
    tran_state_table_offset: int = 0
    commit_log_offset: int = 0
    commit_or_rollback: int = 0
    from_transaction_check: bool = False
    msg_id: str = ""
    transaction_id: str = ""

    def encode(self) -> dict[str, str]:
        return {
            "producerGroup": self.producer_group,
            "tranStateTableOffset": str(self.tran_state_table_offset),
            "commitLogOffset": str(self.commit_log_offset),
            "commitOrRollback": str(self.commit_or_rollback),
            "fromTransactionCheck": _bool(self.from_transaction_check),
            "msgId": self.msg_id,
            "transactionId": self.transaction_id,
        }


@dataclass
class CheckTransactionStateRequestHeader:
    tran_state_table_offset: int = 0
    commit_log_offset: int = 0
    msg_id: str = ""
    transaction_id: str = ""
    offset_msg_id: str = ""

    def encode(self) -> dict[str, str]:
        return {
            "tranStateTableOffset": str(self.tran_state_table_offset),
            "commitLogOffset": str(self.commit_log_offset),
            "msgId": self.msg_id,
            "transactionId": self.transaction_id,
            "offsetMsgId": self.offset_msg_id,
        }

    def decode(self, properties: Mapping[str, str]) -> "CheckTransactionStateRequestHeader":
        """Fill fields from ``properties``; unparsable offsets become 0.

        The transaction id and offset message id are read into ``msg_id``,
        the later key winning, as brokers expect.
        """
        if "tranStateTableOffset" in properties:
            self.tran_state_table_offset = _int(properties["tranStateTableOffset"])
        if "commitLogOffset" in properties:
            self.commit_log_offset = _int(properties["commitLogOffset"])
        for key in ("msgId", "transactionId", "offsetMsgId"):
            if key in properties:
                self.msg_id = properties[key]
        return self


@dataclass
class ConsumerSendMsgBackRequestHeader:
    group: str = ""
    offset: int = 0
    delay_level: int = 0
    origin_msg_id: str = ""
    origin_topic: str = ""
    unit_mode: bool = False
    max_reconsume_times: int = 0

    def encode(self) -> dict[str, str]:
        return {
            "group": self.group,
            "offset": str(self.offset),
            "delayLevel": str(self.delay_level),
            "originMsgId": self.origin_msg_id,
            "originTopic": self.origin_topic,
            "unitMode": _bool(self.unit_mode),
            "maxReconsumeTimes": str(self.max_reconsume_times),
        }


@dataclass
class PullMessageRequestHeader:
    consumer_group: str = ""
    topic: str = ""
    queue_id: int = 0
    queue_offset: int = 0
    max_msg_nums: int = 0
    sys_flag: int = 0
    commit_offset: int = 0
    suspend_timeout: timedelta = timedelta(0)
    sub_expression: str = ""
    sub_version: int = 0
    expression_type: str = ""

    def encode(self) -> dict[str, str]:
        return {
            "consumerGroup": self.consumer_group,
            "topic": self.topic,
            "queueId": str(self.queue_id),
            "queueOffset": str(self.queue_offset),
            "maxMsgNums": str(self.max_msg_nums),
            "sysFlag": str(self.sys_flag),
            "commitOffset": str(self.commit_offset),
            "suspendTimeoutMillis": str(self.suspend_timeout // timedelta(milliseconds=1)),
            "subscription": self.sub_expression,
            "subVersion": str(self.sub_version),
            "expressionType": self.expression_type,
        }


@dataclass
class GetConsumerListRequestHeader:
    consumer_group: str = ""

    def encode(self) -> dict[str, str]:
        return {"consumerGroup": self.consumer_group}


@dataclass
class GetMaxOffsetRequestHeader:
    topic: str = ""
    queue_id: int = 0

    def encode(self) -> dict[str, str]:
        return {"topic": self.topic, "queueId": str(self.queue_id)}


@dataclass
class QueryConsumerOffsetRequestHeader:
    consumer_group: str = ""
    topic: str = ""
    queue_id: int = 0

    def encode(self) -> dict[str, str]:
        return {
            "consumerGroup": self.consumer_group,
            "topic": self.topic,
            "queueId": str(self.queue_id),
        }


@dataclass
class SearchOffsetRequestHeader:
    topic: str = ""
    queue_id: int = 0
    timestamp: int = 0

    def encode(self) -> dict[str, str]:
        return {
            "topic": self.topic,
            "queueId": str(self.queue_id),
            "timestamp": str(self.timestamp),
        }


@dataclass
class UpdateConsumerOffsetRequestHeader:
    consumer_group: str = ""
    topic: str = ""
    queue_id: int = 0
    commit_offset: int = 0

    def encode(self) -> dict[str, str]:
        return {
            "consumerGroup": self.consumer_group,
            "topic": self.topic,
            "queueId": str(self.queue_id),
            "commitOffset": str(self.commit_offset),
        }


@dataclass
class GetRouteInfoRequestHeader:
    topic: str = ""

    def encode(self) -> dict[str, str]:
        return {"topic": self.topic}


@dataclass
class GetConsumerRunningInfoHeader:
    consumer_group: str = ""
    client_id: str = ""

    def encode(self) -> dict[str, str]:
        return {"consumerGroup": self.consumer_group, "clientId": self.client_id}

    def decode(self, properties: Mapping[str, str]) -> "GetConsumerRunningInfoHeader":
        self.consumer_group = properties.get("consumerGroup", self.consumer_group)
        self.client_id = properties.get("clientId", self.client_id)
        return self


@dataclass
class QueryMessageRequestHeader:
    topic: str = ""
    key: str = ""
    max_num: int = 0
    begin_timestamp: int = 0
    end_timestamp: int = 0

    def encode(self) -> dict[str, str]:
        return {
            "topic": self.topic,
            "key": self.key,
            "maxNum": str(self.max_num),
            "beginTimestamp": str(self.begin_timestamp),
            "endTimestamp": str(self.end_timestamp),
        }


@dataclass
class ViewMessageRequestHeader:
    offset: int = 0

    def encode(self) -> dict[str, str]:
        return {"offset": str(self.offset)}


@dataclass
class CreateTopicRequestHeader:
    topic: str = ""
    default_topic: str = ""
    read_queue_nums: int = 0
    write_queue_nums: int = 0
    perm: int = 0
    topic_filter_type: str = ""
    topic_sys_flag: int = 0
    order: bool = False

    def encode(self) -> dict[str, str]:
        return {
            "topic": self.topic,
            "defaultTopic": self.default_topic,
            "readQueueNums": str(self.read_queue_nums),
            "writeQueueNums": str(self.write_queue_nums),
            "perm": str(self.perm),
            "topicFilterType": self.topic_filter_type,
            "topicSysFlag": str(self.topic_sys_flag),
            "order": _bool(self.order),
        }


@dataclass
class TopicListRequestHeader:
    topic: str = ""

    def encode(self) -> dict[str, str]:
        return {"topic": self.topic}


@dataclass
class DeleteTopicRequestHeader:
    topic: str = ""

    def encode(self) -> dict[str, str]:
        return {"topic": self.topic}


@dataclass
class ResetOffsetHeader:
    topic: str = ""
    group: str = ""
    timestamp: int = 0
    is_force: bool = False

    def encode(self) -> dict[str, str]:
        return {
            "topic": self.topic,
            "group": self.group,
            "timestamp": str(self.timestamp),
        }

    def decode(self, properties: Mapping[str, str]) -> "ResetOffsetHeader":
        """Fill fields from ``properties``; an unparsable timestamp becomes 0."""
        self.topic = properties.get("topic", self.topic)
        self.group = properties.get("group", self.group)
        if "timestamp" in properties:
            self.timestamp = _int(properties["timestamp"])
        return self


@dataclass
class ConsumeMessageDirectlyHeader:
    consumer_group: str = ""
    client_id: str = ""
    msg_id: str = ""
    broker_name: str = ""

    def encode(self) -> dict[str, str]:
        return {
            "consumerGroup": self.consumer_group,
            "clientId": self.client_id,
            "msgId": self.msg_id,
            "brokerName": self.broker_name,
        }

    def decode(self, properties: Mapping[str, str]) -> "ConsumeMessageDirectlyHeader":
        self.consumer_group = properties.get("consumerGroup", self.consumer_group)
        self.client_id = properties.get("clientId", self.client_id)
        self.msg_id = properties.get("msgId", self.msg_id)
        self.broker_name = properties.get("brokerName", self.broker_name)
        return self
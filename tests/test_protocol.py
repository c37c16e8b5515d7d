from datetime import timedelta

import pytest

from rocketwire.protocol import (
    CheckTransactionStateRequestHeader,
    ConsumeMessageDirectlyHeader,
    ConsumerSendMsgBackRequestHeader,
    CreateTopicRequestHeader,
    DeleteTopicRequestHeader,
    EndTransactionRequestHeader,
    GetConsumerListRequestHeader,
    GetConsumerRunningInfoHeader,
    GetMaxOffsetRequestHeader,
    GetRouteInfoRequestHeader,
    PullMessageRequestHeader,
    QueryConsumerOffsetRequestHeader,
    QueryMessageRequestHeader,
    RequestCode,
    ResetOffsetHeader,
    SearchOffsetRequestHeader,
    SendMessageRequestHeader,
    SendMessageRequestV2Header,
    TopicListRequestHeader,
    UpdateConsumerOffsetRequestHeader,
    ViewMessageRequestHeader,
)


def test_request_codes_match_wire_values():
    assert RequestCode.SEND_MESSAGE == 10
    assert RequestCode.GET_ROUTE_INFO_BY_TOPIC == 105
    assert RequestCode.SEND_BATCH_MESSAGE == 320
    assert RequestCode(309) is RequestCode.CONSUME_MESSAGE_DIRECTLY


def _send_header():
    return SendMessageRequestHeader(
        producer_group="pg",
        topic="t1",
        queue_id=3,
        sys_flag=2,
        born_timestamp=1574791577504,
        flag=7,
        properties="k\x01v",
        reconsume_times=1,
        unit_mode=True,
        max_reconsume_times=16,
        batch=False,
        default_topic="dt",
        default_topic_queue_nums=8,
    )


def test_send_message_header_uses_fixed_default_topic():
    encoded = _send_header().encode()
    assert encoded["defaultTopic"] == "TBW102"
    assert encoded["defaultTopicQueueNums"] == "4"
    assert encoded["unitMode"] == "true"
    assert encoded["batch"] == "false"
    assert encoded["bornTimestamp"] == "1574791577504"
    assert encoded["queueId"] == "3"
    assert encoded["properties"] == "k\x01v"


def test_send_message_v2_header_uses_short_keys_and_own_defaults():
    header = SendMessageRequestV2Header.from_header(_send_header())
    encoded = header.encode()
    assert sorted(encoded) == list("abcdefghijklm")
    assert encoded["a"] == "pg"
    assert encoded["b"] == "t1"
    assert encoded["c"] == "dt"
    assert encoded["d"] == "8"
    assert encoded["g"] == "1574791577504"
    assert encoded["k"] == "true"
    assert encoded["m"] == "false"


def test_end_transaction_header():
    encoded = EndTransactionRequestHeader(
        producer_group="pg",
        tran_state_table_offset=11,
        commit_log_offset=22,
        commit_or_rollback=8,
        from_transaction_check=True,
        msg_id="m",
        transaction_id="tx",
    ).encode()
    assert encoded == {
        "producerGroup": "pg",
        "tranStateTableOffset": "11",
        "commitLogOffset": "22",
        "commitOrRollback": "8",
        "fromTransactionCheck": "true",
        "msgId": "m",
        "transactionId": "tx",
    }


def test_check_transaction_state_decode_offsets():
    header = CheckTransactionStateRequestHeader().decode(
        {"tranStateTableOffset": "42", "commitLogOffset": "bad", "msgId": "m1"}
    )
    assert header.tran_state_table_offset == 42
    assert header.commit_log_offset == 0
    assert header.msg_id == "m1"


def test_check_transaction_state_decode_empty_keeps_fields():
    header = CheckTransactionStateRequestHeader(msg_id="keep", commit_log_offset=5)
    header.decode({})
    assert header.msg_id == "keep"
    assert header.commit_log_offset == 5


def test_check_transaction_state_encode():
    header = CheckTransactionStateRequestHeader(
        tran_state_table_offset=1, commit_log_offset=2, msg_id="m",
        transaction_id="t", offset_msg_id="o",
    )
    encoded = header.encode()
    assert encoded["commitLogOffset"] == "2"
    assert encoded["offsetMsgId"] == "o"
    assert len(encoded) == 5


def test_consumer_send_msg_back_header():
    encoded = ConsumerSendMsgBackRequestHeader(
        group="g", offset=100, delay_level=3, origin_msg_id="id",
        origin_topic="t", unit_mode=False, max_reconsume_times=16,
    ).encode()
    assert encoded["offset"] == "100"
    assert encoded["delayLevel"] == "3"
    assert encoded["unitMode"] == "false"
    assert encoded["maxReconsumeTimes"] == "16"


def test_pull_message_header_suspend_timeout_in_millis():
    encoded = PullMessageRequestHeader(
        consumer_group="cg", topic="t", queue_id=1, queue_offset=10,
        max_msg_nums=32, sys_flag=2, commit_offset=5,
        suspend_timeout=timedelta(seconds=20), sub_expression="*",
        sub_version=9, expression_type="TAG",
    ).encode()
    assert encoded["suspendTimeoutMillis"] == "20000"
    assert encoded["subscription"] == "*"
    assert encoded["maxMsgNums"] == "32"
    assert encoded["expressionType"] == "TAG"


@pytest.mark.parametrize(
    "header, expected",
    [
        (GetConsumerListRequestHeader("cg"), {"consumerGroup": "cg"}),
        (GetMaxOffsetRequestHeader("t", 2), {"topic": "t", "queueId": "2"}),
        (
            QueryConsumerOffsetRequestHeader("cg", "t", 1),
            {"consumerGroup": "cg", "topic": "t", "queueId": "1"},
        ),
        (
            SearchOffsetRequestHeader("t", 1, 99),
            {"topic": "t", "queueId": "1", "timestamp": "99"},
        ),
        (
            UpdateConsumerOffsetRequestHeader("cg", "t", 1, 77),
            {"consumerGroup": "cg", "topic": "t", "queueId": "1", "commitOffset": "77"},
        ),
        (GetRouteInfoRequestHeader("t"), {"topic": "t"}),
        (ViewMessageRequestHeader(123), {"offset": "123"}),
        (TopicListRequestHeader("t"), {"topic": "t"}),
        (DeleteTopicRequestHeader("t"), {"topic": "t"}),
    ],
)
def test_simple_headers(header, expected):
    assert header.encode() == expected


def test_query_message_header():
    encoded = QueryMessageRequestHeader("t", "k", 32, 1, 2).encode()
    assert encoded == {
        "topic": "t", "key": "k", "maxNum": "32",
        "beginTimestamp": "1", "endTimestamp": "2",
    }


def test_create_topic_header():
    encoded = CreateTopicRequestHeader(
        topic="t", default_topic="TBW102", read_queue_nums=4, write_queue_nums=4,
        perm=6, topic_filter_type="SINGLE_TAG", topic_sys_flag=0, order=True,
    ).encode()
    assert encoded["perm"] == "6"
    assert encoded["order"] == "true"
    assert encoded["topicFilterType"] == "SINGLE_TAG"
    assert encoded["defaultTopic"] == "TBW102"


def test_consumer_running_info_round_trip():
    original = GetConsumerRunningInfoHeader("cg", "client-1")
    decoded = GetConsumerRunningInfoHeader().decode(original.encode())
    assert decoded == original


def test_consumer_running_info_partial_decode():
    header = GetConsumerRunningInfoHeader("cg", "old")
    header.decode({"clientId": "new"})
    assert header.consumer_group == "cg"
    assert header.client_id == "new"


def test_reset_offset_round_trip_drops_force_flag():
    original = ResetOffsetHeader("t", "g", 1574791577504, is_force=True)
    encoded = original.encode()
    assert "isForce" not in encoded
    decoded = ResetOffsetHeader().decode(encoded)
    assert (decoded.topic, decoded.group, decoded.timestamp) == ("t", "g", 1574791577504)
    assert decoded.is_force is False


def test_reset_offset_bad_timestamp_is_zero():
    header = ResetOffsetHeader(timestamp=5).decode({"timestamp": "x"})
    assert header.timestamp == 0


def test_consume_message_directly_round_trip():
    original = ConsumeMessageDirectlyHeader("cg", "cid", "mid", "broker-a")
    decoded = ConsumeMessageDirectlyHeader().decode(original.encode())
    assert decoded == original
    assert original.encode()["brokerName"] == "broker-a"
# rocketwire

Building blocks for talking to RocketMQ-style message brokers and name
servers from Python. It has no dependencies outside the standard library.

- `rocketwire.remote.codec`: the remoting frame format. A `RemotingCommand`
  is encoded with `encode` and decoded with `decode`, using either the JSON
  header codec or the compact binary header codec (`CodecType.JSON`,
  `CodecType.ROCKETMQ`). `new_command` builds a command with a fresh opaque
  id from a request header.
- `rocketwire.remote.connection`: `open_connection` and `TcpConnection`, a
  plain TCP connection with `write`, `read_exactly` and `destroy`.
- `rocketwire.protocol`: request codes (`RequestCode`) and the request
  headers whose `encode` method gives a command's extension fields; some also
  `decode` extension fields back into the header.
- `rocketwire.routedata`: `TopicRouteData`, `QueueData` and `BrokerData`,
  `decode_topic_route_data` for route bodies sent by a name server, and
  `topic_route_data_changed` to compare two routes regardless of order.
- `rocketwire.perm`: queue permission bits and `perm_to_string`.
- `rocketwire.validators`: `validate_group`, which raises
  `InvalidGroupError` for an empty or over-long group name.
- `rocketwire.utils.compression`: zlib `compress` (levels 1 to 9) and
  `uncompress`, which returns data that is not zlib unchanged.
- `rocketwire.utils.net`: `local_ip`, `client_ip4`, `fake_ip` and
  `get_address_by_bytes`.
- `rocketwire.utils.uniqueset`: `UniqueSet`, items keyed by their unique id
  with a sorted JSON form, and `StringUnique`.

## Installation

```
pip install .
```

Running the tests needs the `test` extra:

```
pip install ".[test]"
pytest
```

## Examples

Encode a command and decode it again:

```python
from rocketwire.remote.codec import CodecType, new_command, encode, decode
from rocketwire.protocol import GetRouteInfoRequestHeader, RequestCode

header = GetRouteInfoRequestHeader(topic="orders")
command = new_command(RequestCode.GET_ROUTE_INFO_BY_TOPIC, header, b"")
frame = encode(command, CodecType.ROCKETMQ)

# The first four bytes hold the frame length.
decoded = decode(frame[4:])
assert decoded.ext_fields == {"topic": "orders"}
```

Send it over a connection and read one frame back:

```python
from rocketwire.remote.connection import open_connection

with open_connection("127.0.0.1:9876", 3.0) as conn:
    conn.write(frame)
    length = int.from_bytes(conn.read_exactly(4), "big")
    response = decode(conn.read_exactly(length))
    print(response.code, response.remark)
```

Parse a route body, in which broker ids are bare numeric keys:

```python
from rocketwire.routedata import decode_topic_route_data
from rocketwire.perm import queue_is_writeable, perm_to_string

body = (
    '{"queueDatas":[{"brokerName":"b1","readQueueNums":4,'
    '"writeQueueNums":4,"perm":6,"topicSynFlag":0}],'
    '"brokerDatas":[{"cluster":"c1","brokerName":"b1",'
    '"brokerAddrs":{0:"127.0.0.1:10911"}}]}'
)
route = decode_topic_route_data(body)
assert route.broker_data_list[0].broker_addresses == {0: "127.0.0.1:10911"}
assert perm_to_string(route.queue_data_list[0].perm) == "RW-"
assert queue_is_writeable(route.queue_data_list[0].perm)
```

Compress a message body:

```python
from rocketwire.utils.compression import compress, uncompress

packed = compress(b"hello, go", 5)
assert uncompress(packed) == b"hello, go"
```

## What it does not do

The package works at the level of frames, headers and route data. It does
not include a client that matches responses to requests by opaque id, waits
on them with timeouts or dispatches incoming requests to handlers; with
`TcpConnection` you read and write frames yourself. It does not keep a list
of name servers, query them for routes, cache routes or resolve broker
addresses, and it has no producer or consumer: no heartbeat records,
consumer running information or selection of the queues to publish to.
There is no command-line program.
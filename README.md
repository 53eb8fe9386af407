# gamekit

Building blocks for the backend of an online game, as a plain Python library.

## What is inside

| Module | Purpose |
| --- | --- |
| `gamekit.mathx` | `checked_sum`, which adds integers and raises `OverflowError` once the running total passes the 32-bit maximum. |
| `gamekit.models` | Player data: `Item`, `ItemList`, `Task`, `TaskList`, `Role`, `User`, `Account`, and the abstract `Document` base for stored records. `User.to_document` / `User.from_document` convert to and from plain dicts. |
| `gamekit.options` | Service configuration read from YAML (`Option`, `Option.from_dict`, `load_option`) and the `Service` discovery record with `to_json` / `from_json`. |
| `gamekit.response` | `ResponseWriter`, which writes a payload in a `Code` / `Message` / `Data` JSON envelope to a binary writer. |
| `gamekit.log` | A line logger with a timestamp and level prefix (`SysLogger`, `StreamHandler`, and module-level `debug`, `info`, `warn`, `error` with their `…f` forms). |
| `gamekit.framing` | Length-prefixed big-endian frames (`Frame`, `RpcFrame`, `read_frame`, `FrameError`). |
| `gamekit.skiplist` | An ordered set of positive 32-bit integers backed by a skip list (`SkipList`). |
| `gamekit.appstore` | Receipt verification against the App Store (`AppStore`, `IAPResponse`, `AppStoreError`, `error_for_status`). |
| `gamekit.appstore_notify` | Decoding and certificate-chain checking of App Store server notifications, version 2 (`decode_signed_payload`, `extract_claims`, `NotificationV2Payload`). |
| `gamekit.googleplay` | Google Play purchase signature checks (`verify_signature`, `SignatureError`). |
| `gamekit.notify` | Alert pushes to DingTalk robots and Telegram bots (`DingdingClient`, `TelegramClient`). |

## Examples

An ordered set of positive integers:

```python
from gamekit.skiplist import SkipList

scores = SkipList()
scores.add(30)
scores.add(10)
scores.add(20)
assert not scores.add(20)      # duplicates are rejected
assert list(scores) == [10, 20, 30]
assert 20 in scores and len(scores) == 3
scores.delete(20)
```

Item stacks, merged by id:

```python
from gamekit.models import Item, ItemList

bag = ItemList()
assert bag.add(Item(1, 5), Item(1, 3), Item(2, 1))
assert bag.get(1).count == 8
assert not bag.add(Item(3, 0))   # non-positive counts are refused
```

Frames with a 16-bit total length, a method number and a payload:

```python
import io
from gamekit.framing import Frame, read_frame

raw = Frame(method=1, payload=b"abc").encode()
assert raw == b"\x00\x07\x00\x01abc"
assert Frame.parse(read_frame(io.BytesIO(raw))) == Frame(1, b"abc")
```

Configuration from a YAML file with sections such as `tcp`, `quic`, `etcd`, `mysql` and `mongo`:

```python
from gamekit.options import load_option

option = load_option("logic.conf")
prefix = option.etcd.join("logic")   # version prefix followed by the key
```

Logging:

```python
from gamekit import log

log.info("server running")
log.errorf("listen on %s failed", "127.0.0.1:9600")
```

Each line starts with a `YYYY-MM-DD HH:MM:SS` timestamp followed by the level, for example `[INFO]`.

A DingTalk alert:

```python
from gamekit.notify import DingdingClient

robot = DingdingClient(access_token="token", secret="secret")
robot.push("disk almost full")
```

## Errors

Failures are raised as exceptions: `FrameError` for malformed or oversized frames, `EOFError` when a stream ends inside a frame, `AppStoreError` for non-zero receipt status codes, `LookupError` from `IAPResponse.get_order` for an unknown transaction, `SignatureError` for bad Google Play keys or signatures, and `ValueError` or `jwt` exceptions for notification payloads that are malformed or do not verify.

## What this package does not do

gamekit holds data models, wire formats and service clients only. It has no network transport: it does not open sockets, run servers or make RPC calls, so `Frame` and `RpcFrame` must be sent and received by your own code. It does not store anything: `User` and `Account` are in-memory records, with no database layer behind them. It does not issue or check login tokens, and it installs no commands.
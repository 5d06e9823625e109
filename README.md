# lumber

`lumber` turns raw log lines into classified, normalized events and moves
them from a source to a destination. It has two parts:

- a classification facade, `lumber.client.Lumber`, that wraps a
  classification engine and exposes its taxonomy;
- an asyncio pipeline, `lumber.pipeline.Pipeline`, that reads logs from a
  connector, classifies them and writes them to an output, with optional
  deduplication.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Classifying logs

`Lumber(engine, roots, embedder)` takes:

- `engine`: an object with `process(raw)` returning a `CanonicalEvent` and
  `process_batch(raws)` returning a list of them;
- `roots`: the taxonomy roots, each with a `name` and `children`, where each
  child has a `name` and a `severity`;
- `embedder`: an object with `close()`.

It works as a context manager; leaving the block calls `close()`, which
closes the embedder.

```python
from lumber.client import Lumber
from lumber.events import Log

with Lumber(engine, roots, embedder) as classifier:
    event = classifier.classify("ERROR: connection refused to db-primary:5432")
    print(event.type, event.category, event.severity)

    events = classifier.classify_batch([
        "GET /api/users 200 OK 12ms",
        "Build succeeded in 45s",
    ])

    event = classifier.classify_log(Log(text="GET /health 200 OK", source="edge"))
    events = classifier.classify_logs([Log(text="disk full"), Log(text="GET / 200")])

    for category in classifier.taxonomy():
        for label in category.labels:
            print(label.path, label.severity)
```

`classify` and `classify_batch` stamp their input with the current UTC time.
`classify_log` and `classify_logs` keep a `Log`'s timestamp, source and
metadata; a `Log` without a timestamp gets the current UTC time (one shared
time per batch).

`taxonomy()` returns a list of `Category` objects, each holding a tuple of
`Label`s with a `name`, a `path` of the form `ROOT.label` and a `severity`.

### Events

`lumber.events` holds the data types:

- `Event`: the public, immutable result with `type`, `category`,
  `severity`, `timestamp`, `summary`, `confidence`, `raw` and `count`.
  `Event.to_dict()` returns a JSON-ready mapping; the timestamp is written in
  ISO 8601 form (or `None`), and `confidence`, `raw` and `count` are left out
  when they are empty or zero.
- `Log`: a structured input entry (`text`, `timestamp`, `source`,
  `metadata`).
- `RawLog` and `CanonicalEvent`: what engines, connectors and outputs
  exchange.
- `event_from_canonical(canonical)`: converts a `CanonicalEvent` to an
  `Event`.

### Options

`lumber.options` describes where model files live and how to classify:

- `Options`: `model_dir`, explicit `model_path`, `vocab_path` and
  `projection_path`, `confidence_threshold` (default `0.5`) and
  `verbosity` (default `"standard"`).
- `resolve_paths(options)`: returns `ModelPaths(model, vocab, projection)`.
  An explicit `model_path` takes precedence and all three explicit paths are
  returned as given. Otherwise the directory (default `models`) is used, with
  `model_quantized.onnx`, `vocab.txt` and `2_Dense/model.safetensors` inside
  it.
- `parse_verbosity(value)`: maps `"minimal"` and `"full"` to
  `Verbosity.MINIMAL` and `Verbosity.FULL`; any other value gives
  `Verbosity.STANDARD`.

## Pipelines

`Pipeline(connector, engine, output, deduplicator=None, window=0.0,
max_buffer_size=0)` connects three parts, each described by a protocol in
`lumber.pipeline`:

- `Connector`: `stream(config)` returns an async iterable of `RawLog`;
  `async query(config, params)` returns a list of them.
- `Processor`: `process(raw)` and `process_batch(raws)`, raising on failure.
- `Output`: `async write(event)` and `close()`.
- `Deduplicator` (optional): `deduplicate_batch(events)` returns the merged
  events.

```python
import asyncio
from lumber.pipeline import Pipeline

async def run():
    pipeline = Pipeline(connector, engine, output, deduplicator, window=1.0)
    try:
        await pipeline.stream(config)
    finally:
        pipeline.close()

asyncio.run(run())
```

- `await pipeline.stream(config)` processes logs as they arrive until the
  source is exhausted or the task is cancelled. Logs the engine fails on are
  skipped, counted and logged as warnings. Without a deduplicator every event
  is written at once. With one, events are held in a
  `lumber.buffer.StreamBuffer` and written as deduplicated batches when the
  `window` (in seconds) since the first buffered event has elapsed, when
  `max_buffer_size` events are buffered (0 means no limit), when the source
  ends, or when the task is cancelled.
- `await pipeline.query(config, params)` runs once. It tries
  `process_batch` first; if that raises, it processes the logs one at a time
  and skips the ones that fail. The results are deduplicated when a
  deduplicator is set, then written.
- `pipeline.skipped_logs` and `pipeline.written_events` are properties
  holding the counters.
- `pipeline.close()` logs the totals, if any, and closes the output,
  returning whatever the output's `close()` returns.

Failures of the connector, of writing to the output and of flushing the
buffer are raised as `PipelineError`, chained to the original exception.

### StreamBuffer

`StreamBuffer(deduplicator, output, window, max_size=0, on_write=None)` can
also be used on its own:

- `add(event)` buffers an event, starts the timer with the first one, and
  returns `True` when the buffer has reached `max_size`.
- `seconds_until_flush()` returns the time left on the timer, or `None`
  when nothing is buffered.
- `await wait_for_flush()` returns when the timer fires.
- `await flush()` deduplicates and writes everything buffered, calls
  `on_write` after each write, and stops the timer.

## What the package does not do

The package holds no classifier of its own. It does not load model files,
compute embeddings, define a taxonomy, compact log text or apply a
confidence threshold: those come from the engine, roots and embedder passed
to `Lumber`, and `Options` only records the settings and file locations for
them. It has no log connectors, outputs or deduplicator either; they are
supplied by the caller through the protocols above. There is no
command-line program.
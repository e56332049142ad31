# multiscan

multiscan runs command-line antivirus engines and file identification tools. It turns their
text output into plain Python values.

## Antivirus engines

Each engine has its own module under `multiscan.av`:

- avast
- avira
- bitdefender
- clamav
- comodo
- drweb
- eset
- fsecure
- kaspersky
- mcafee
- sophos
- symantec
- trendmicro
- windefender

Each of these modules has a `Scanner` class with a `scan_file(file_path)` method. The method
returns a `multiscan.result.Result`, a dataclass with three fields:

- `infected`: whether the engine flagged the file.
- `output`: the detection name.
- `out`: the raw tool output.

`Result.to_dict()` returns only `infected` and `output`.

Error handling works like this:

- When a tool's output cannot be understood, the scanner raises
  `multiscan.result.ParseDetectionError`.
- When a tool fails, the scanner raises `multiscan.utils.CommandError`. A tool has failed
  when it exits with a status that does not mean "detection", or when it runs past its
  timeout. The error carries `returncode`, `output` and `timed_out`.

Some engines offer more than `scan_file`. Depending on the engine, a module may also have:

- version queries, such as `clamav.version()`, `avira.get_version()` or
  `sophos.get_version()`;
- license helpers, such as `avira.license_status()` or `avast.is_license_expired()`;
- a `start_daemon()` function;
- for Avast only, `Scanner.scan_url(url)` and `Scanner.scan_reader(reader)`.

The engines themselves must be installed at the paths their vendors use.

## Installation

```
pip install .
```

## Scanning a file

```python
from multiscan.av import clamav

result = clamav.Scanner().scan_file("/samples/sample.exe")
if result.infected:
    print("detected as", result.output)
```

## Parsing output you already have

Parsing is kept apart from running the tool. Every engine module has a parsing function, for
example `parse_detection(out)`, or `parse_log(data)` for Symantec. You can feed saved output
to it directly:

```python
from multiscan.av import sophos

result = sophos.parse_detection(">>> Virus 'Mal/FakeAV-IV' found in file /samples/x\n")
print(result.output)  # Mal/FakeAV-IV
```

Version output can be parsed the same way, with the `parse_version` or
`parse_program_version` functions.

## File identification

- `multiscan.trid.scan(path)` runs TrID and returns its file type guesses, without the
  banner lines.
- `multiscan.packer.scan(path)` runs Detect It Easy and returns the non-empty lines of its
  report.
- `trid.parse_output(text)` and `packer.parse_output(text)` work on output you already have.

## Local object storage

`multiscan.local_storage.LocalStorage(root)` stores objects as files under
`root/<bucket>/<key>`. It creates `root` if it is missing. It has these methods:

- `make_bucket(bucket)`: creates the directory for a bucket. Call it before you upload.
- `upload(bucket, key, file)`: writes a binary stream to the object.
- `download(bucket, key, file)`: copies the object into a binary stream.
- `exists(bucket, key)`: returns whether the object is there.

```python
import io
from multiscan.local_storage import LocalStorage

store = LocalStorage("/var/lib/samples")
store.make_bucket("uploads")
store.upload("uploads", "sample.bin", io.BytesIO(b"data"))
assert store.exists("uploads", "sample.bin")
```

## Other helpers

- `multiscan.randomizer.load_randomizer(words_path)` reads a word list with one word per
  line and returns a `Randomizer`. Its `random()` method returns a randomly chosen word.
- `multiscan.pubsub` defines the `Publisher` and `Subscriber` protocols for message-queue
  clients.
- `multiscan.utils` holds helpers for the following:
  - running commands: `exec_cmd`, `exec_background`;
  - handling files: `copy_file`, `delete_dir_content`, `walk_all_files` and others;
  - expanding a leading `%NAME%` path element: `resolve`;
  - mapping named regex groups: `regex_groups`.

## What this package does not do

- It has no command-line program. Everything is used from Python.
- Storage is local only. There is no cloud or S3-compatible object store, and no function
  that picks a storage backend from configuration.
- `multiscan.pubsub` only describes the publisher and subscriber interfaces. No message-queue
  client is included.

## Running the tests

```
pip install .[test]
pytest
```
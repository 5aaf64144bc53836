# gcovfmt

`gcovfmt` reads and writes the binary files that hold gcov coverage
information: the compiler's notes files (`.gcno`) and the data files
(`.gcda`) produced by an instrumented program.

The format is a stream of 32-bit words in the byte order of the machine
that wrote the file. A file starts with a magic word, a version and a stamp,
and continues with records, each made of a tag, a length in words and data.
64-bit counters are stored as two words, low word first. Strings are stored
as a word count followed by the bytes, NUL-padded to a whole word.

## Modules

- `gcovfmt.constants` – `DATA_MAGIC`, `NOTE_MAGIC`, `VERSION`, the `Tag`
  and `Language` enums, histogram sizes, block and arc flags, and helpers
  for tags and record lengths: `unsigned_to_string`, `swap_endian`,
  `tag_for_counter`, `counter_for_tag`, `tag_is_counter`, `tag_mask`,
  `tag_is_subtag`, `tag_is_sublevel`, `arcs_length`, `arcs_num`,
  `counter_length`, `counter_num`, `comdat_zero_fixup_length` and
  `summary_length`.
- `gcovfmt.records` – dataclasses `Bucket`, `CounterSummary` (with
  `nonzero_buckets()`), `Summary`, `WorkingSet` and `ModuleInfo` (with
  `num_strings()`, `is_exported()`, `includes_all_aux()`, `language()` and
  `has_asm_stmts()`).
- `gcovfmt.ids` – `gen_func_global_id`, `extract_module_id` and
  `extract_func_id`, which pack a module id and a function id into one
  global id (32-bit fields by default).
- `gcovfmt.vfile` – `VirtualFile`, an in-memory output file whose buffer
  doubles until written data fits. It only allows rewinding a file nothing
  has been written to, and truncation only shortens what was written.
- `gcovfmt.histogram` – `histo_index` (log2 buckets, each split into four
  linear sub-buckets), `merge_histograms`, which returns a new merged
  histogram without changing its inputs, and `compute_working_sets`, which
  returns the 128 working-set entries of a `CounterSummary`.
- `gcovfmt.reader` – `GcovReader` reads from a binary stream or from bytes:
  `check_magic` (returns 1 for the reader's byte order, -1 when the file is
  byte-swapped, after which all words are swapped, and 0 for no match),
  `read_unsigned`, `read_counter`, `read_string`, `read_summary`,
  `read_comdat_zero_fixup`, `read_string_array`, `read_build_info`,
  `read_module_info`, `position` and `sync`. A truncated file or a
  malformed record raises `GcovFormatError`, a subclass of `ValueError`.
- `gcovfmt.writer` – `GcovWriter` writes to a binary stream (an in-memory
  one by default): `write_unsigned`, `write_counter`, `write_string`,
  `write_string_array`, `write_tag` with `write_length` to fill in the
  record length later, `write_tag_length`, `write_summary`, `position`,
  `flush`, `seek` and `truncate`. Words are buffered until `flush`, `seek`
  or `truncate`. `compute_string_array_len` gives the words a string array
  takes.
- `gcovfmt.gcovfile` – `open_gcov` and `GcovFile` open a file on disk in an
  `OpenMode`: `READ` (existing file, shared lock), `WRITE` (created anew,
  exclusive lock) or `UPDATE` (existing file, or a new empty one, exclusive
  lock), which starts in the reading state and switches to writing with
  `rewrite()`. Locks are taken where `fcntl` is available. `GcovFile`
  offers `reader()`, `writer()`, `mtime()` and `close()`, which flushes the
  writer; it is also a context manager.

## Example

```python
from gcovfmt.constants import DATA_MAGIC, VERSION, Tag
from gcovfmt.gcovfile import OpenMode, open_gcov

with open_gcov("prog.gcda", OpenMode.WRITE) as gcov:
    out = gcov.writer()
    out.write_unsigned(DATA_MAGIC)
    out.write_unsigned(VERSION)
    out.write_unsigned(0)
    pos = out.write_tag(Tag.FUNCTION)
    out.write_unsigned(42)
    out.write_unsigned(1)
    out.write_unsigned(2)
    out.write_length(pos)

with open_gcov("prog.gcda", OpenMode.READ) as gcov:
    src = gcov.reader()
    assert src.check_magic(DATA_MAGIC) == 1
    version = src.read_unsigned()
    stamp = src.read_unsigned()
    tag = src.read_unsigned()      # Tag.FUNCTION
    length = src.read_unsigned()   # 3
```

## What it does not do

`gcovfmt` works at the level of words and single records. It has no
command-line tool, does not walk or dump a whole notes or data file, does
not merge data files, and does not produce coverage reports; callers read
the tags and lengths and decide which record reader to call.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```
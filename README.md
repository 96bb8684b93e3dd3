# exertrack

`exertrack` drives a collection of small Rust exercises. It reads the list of
exercises from an `info.toml` file and compiles, tests or lints each one with
`rustc`, `cargo` and `cargo clippy`. It shows how far you have got and re-checks
your work whenever you save a file.

An exercise counts as unfinished while its source still holds an
`// I AM NOT DONE` comment (or `/// I AM NOT DONE`, with any spacing). Once it
compiles and passes, delete that line to move on to the next one.

## Requirements

- Python 3.11 or later
- A Rust toolchain with `rustc` on your `PATH` (and `cargo` for clippy and
  build-script exercises)
- Run every command from the directory that holds `info.toml`; apart from
  `-v`, every command exits with status 1 when that file is missing or `rustc`
  cannot be run

## Installation

```
pip install .
```

## The exercise list

`info.toml` holds one `[[exercises]]` table per exercise, in the recommended
order:

```toml
[[exercises]]
name = "vecs1"
path = "exercises/vecs/vecs1.rs"
mode = "test"
hint = "Use the vec! macro."
```

`mode` is one of:

- `compile`: build with `rustc` and run the binary
- `test`: build with `rustc --test` and run the tests
- `clippy`: write `./exercises/clippy/Cargo.toml` and run `cargo clippy` with
  warnings denied
- `buildscript`: write `./exercises/tests/Cargo.toml` and run `cargo test`

Binaries are built to a temporary file in the current directory and removed
afterwards.

## Usage

```
exertrack                  # show the welcome text
exertrack -v               # show the version
exertrack watch            # verify in order, re-check on every save
exertrack watch --success-hints
exertrack verify           # verify every exercise in the recommended order
exertrack run <name>       # compile and run or test one exercise
exertrack run next         # the first exercise that is not done yet
exertrack hint <name>      # print the hint for an exercise
exertrack reset <name>     # stash your changes to an exercise with git
exertrack list             # list exercises with their status
exertrack list --unsolved --filter move,vec
exertrack lsp              # write rust-project.json for rust-analyzer
exertrack cicvverify       # grade every exercise and write a JSON report
```

Pass `--nocapture` before the subcommand to see the output of test exercises.

`verify` and `run` exit with status 1 when an exercise fails to build, fails
its run or tests, or (for `verify`) is still marked as not done. An unknown
exercise name also gives status 1.

### Watch mode

`watch` first verifies every exercise in order and stops at the first one that
is not finished. It then watches `./exercises` for changed `.rs` files and
re-verifies, starting with the file you changed. While it runs you can type:

- `hint`: print the hint for the current exercise
- `clear`: clear the screen
- `quit`: leave watch mode
- `!<cmd>`: run a command, for example `!rustc --explain E0381`
- `help`: list these commands

### Listing

`list` takes `-p/--paths` or `-n/--names` to print only paths or only names.
`-u/--unsolved` and `-s/--solved` limit the list by status. `-f/--filter` takes
comma-separated patterns, lower-cased and matched against exercise names and
paths. The last line gives the share of exercises that are done.

### rust-analyzer

`lsp` writes `./rust-project.json` with one crate for every `.rs` file below
`./exercises`. The standard library sources are taken from `RUST_SRC_PATH` if
it is set, otherwise from `rustc --print sysroot`.

### Grading report

`cicvverify` runs every exercise at once and writes
`.github/result/check_result.json`. The report holds a result for each
exercise and totals for successes, failures and the time taken in seconds. The
`.github/result` directory must already exist.

## Output

Set `NO_EMOJI` in the environment to use plain-text markers in the output.
Colours are used only when standard output is a terminal; set
`CLICOLOR_FORCE` to a non-zero value to force them, or `CLICOLOR=0` to turn
them off.

## Using it from Python

```python
from exertrack.exercise import load_exercises
from exertrack.verify import VerificationError, verify

exercises = load_exercises("info.toml")
try:
    verify(exercises, (0, len(exercises)))
except VerificationError as exc:
    print("stuck on", exc.exercise.name)
```

`Exercise.state()` returns the lines around the `I AM NOT DONE` marker (an
empty list once it is gone), and `Exercise.looks_done()` tells whether the
marker has been removed. `exertrack.checklist.cicv_verify` returns the
`ExerciseCheckList` it writes.

## What it does not do

`exertrack` ships no exercises of its own; it works only on the exercise files
and `info.toml` you give it. `reset` starts `git stash` and does not wait for
it or check that it succeeded.
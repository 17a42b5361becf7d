# goverage

`goverage` reads a Go coverage profile, the file that
`go test -coverprofile=coverage.out ./...` writes, and builds a browsable
HTML report from it. The report has an index page for the module, one index
page per package directory and one page per source file. Each file page
shows the source with every covered and uncovered block highlighted, and
hovering a block shows its hit count.

For each file, each directory and the whole module, the report gives three
figures:

- **statements**: covered statements out of all statements;
- **lines**: covered lines out of the lines that profile blocks span;
- **functions**: functions with at least one covered statement out of all
  functions that have a body.

Percentages are rounded to two decimals and coloured as low (below 40),
medium (below 80) or high.

## Installation

```
pip install .
```

To locate package sources the tool runs `go list` (from `$GOROOT/bin/go`
when `GOROOT` is set, otherwise `go` on the `PATH`), so a Go toolchain must
be installed. Module-relative paths are worked out from the `go.mod` in the
current working directory.

## Usage

Run it from inside the Go module the profile belongs to:

```
go test -coverprofile=coverage.out ./...
goverage --profile coverage.out --output coverage-report
```

Options:

| Option | Meaning |
| --- | --- |
| `-p`, `--profile` | Coverage profile file to read. |
| `-o`, `--output` | Directory to write the report to. Without it, the report goes to a fresh temporary directory and the tool tries to open its `index.html` in a browser (the `BROWSER` variable first, then the platform opener, then `chrome`, `google-chrome`, `chromium`, `firefox`). If none opens, the path is printed to standard error. |
| `-s`, `--strategy` | Accepted, default `html`; the command always writes the HTML report. |
| `--threshold` | Minimum coverage percentage (0 to 65535). Defaults to 0. |

When the report is written, the total statement coverage, rounded to two
decimals, is published as a GitHub Actions output named `percent`: appended
to the file named by `GITHUB_OUTPUT` when that is set, otherwise printed as a
`::set-output` command. If the coverage is below `--threshold`, a
`::warning::` command is printed as well.

A profile that cannot be read or parsed is reported with
`Error parsing cover profile: ...` and counts as 0%. Other failures are
printed as `Error processing profile: ...`.

## What it does not do

- The command exits with status 0 in every case above; a coverage below the
  threshold produces a warning, not a failing exit status.
- The `--strategy` option does not switch reports: the plain-text summary in
  `goverage.strategies.StdoutStrategy` is only available from Python.
- Function extents come from a lightweight scanner of Go source, not from a
  full Go parser or type checker.
- Page templates and styles are built in and cannot be customised.

## Library use

```python
from goverage.profile import process_profile

percent = process_profile("coverage.out", "coverage-report")
print(f"{percent:.2f}%")
```

The lower-level pieces are available too:

- `goverage.cover.parse_profiles(path)` and `parse_profiles_from_lines(lines)`
  read a profile into `Profile` objects (raising `ProfileParseError` on bad
  input); `Profile.boundaries(src)` gives the highlight boundaries for a
  source file.
- `goverage.funcs.find_funcs(path)` and `find_funcs_in_source(source)` return
  a `FuncExtent` for each function with a body; `FuncExtent.coverage(profile)`
  returns its covered and total statements.
- `goverage.utils.get_profiles_tree(profiles)` groups profiles by directory,
  and `percent(covered, total)` computes a rounded percentage.
- `goverage.report.strategy.HTMLStrategy().execute(profiles, output_dir)`
  writes the report and returns the statement percentage, raising
  `ReportError` when it cannot.
- `goverage.strategies.StdoutStrategy().execute(profiles, output_dir)` prints
  each file's statement coverage; `Registry(*strategies).get(name)` looks a
  strategy up by its `name` (`"HTML"` or `"Stdout"`).
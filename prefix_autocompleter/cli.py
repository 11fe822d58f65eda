"""
cli.py - command line front end for the prefix autocompleter
Features:
- plain lines are learnt (inserted), slash commands query the trie
- batch mode: --train a file, answer --complete prefixes, exit
- Uses Rich for tables and formatting
"""

import argparse
import sys
import time

from rich.console import Console
from rich.table import Table
from rich import box

from prefix_autocompleter.core.errors import AllocationError, PrefixTrieError
from prefix_autocompleter.core.trie import PrefixTrie
from prefix_autocompleter.utils.config_manager import Config
from prefix_autocompleter.utils.logger_utils import Log
from prefix_autocompleter.utils.metrics_tracker import Metrics

BANNER = "Prefix Autocompleter (type /help for cmds)"
HELP = (
    "cmds: /complete [prefix], /freq <word>, /dump, /stats\n"
    "      /config [key val], /train <file>, /quit\n"
    "anything else is learnt as a new entry, start with // to learn a leading /"
)


class CLI:
    """Interactive session around one PrefixTrie."""

    def __init__(self, cfg=None, log=None, console=None):
        self.cfg = cfg or Config()
        self.log = log or Log.from_config(self.cfg)
        self.console = console or Console(highlight=False)
        self.metrics = Metrics()
        self.trie = PrefixTrie.from_config(self.cfg, log=self.log)
        self.running = True

    def out(self, text):
        self.console.print(text, markup=False, soft_wrap=True)

    def start(self):
        self.out(BANNER)
        try:
            while self.running:
                try:
                    line = self.console.input(">> ")
                except (EOFError, KeyboardInterrupt):
                    self.out("bye.")
                    break
                self.handle(line)
        finally:
            self.close()

    def close(self):
        self.trie.destroy()

    def handle(self, line):
        line = line.rstrip("\r\n")
        if not line.strip():
            return
        if line.startswith("//"):
            # escaped leading slash: "//usr/bin" learns "/usr/bin"
            self.learn(line[1:])
        elif line.startswith("/"):
            self.cmd(line)
        else:
            self.learn(line)

    def learn(self, line):
        t0 = time.perf_counter()
        try:
            self.trie.insert(line)
        except PrefixTrieError as e:
            self.log.warning(f"not learnt: {e}")
            self.out(f"err: {e}")
            return
        dt = time.perf_counter() - t0
        self.metrics.record("insert_time", dt)
        if self.cfg.get("show_timings"):
            self.out(f"learnt ({dt * 1000:.3f} ms)")

    def complete(self, prefix):
        t0 = time.perf_counter()
        word = self.trie.autocomplete(prefix)
        self.metrics.record("complete_time", time.perf_counter() - t0)
        return word

    def cmd(self, line):
        c, _, arg = line.partition(" ")
        c = c.lower()

        if c in ("/q", "/quit", "/exit"):
            self.running = False
            self.out("bye.")

        elif c == "/help":
            self.out(HELP)

        elif c == "/complete":
            self.out(self.complete(arg))

        elif c == "/freq" and arg:
            self.out(f"{arg}: {self.trie.frequency(arg)}")

        elif c == "/dump":
            self._dump()

        elif c == "/stats":
            self._stats()

        elif c == "/config":
            self._config(arg.split())

        elif c == "/train" and arg:
            self.train_file(arg.strip())

        else:
            self.out("unknown cmd (try /help)")

    def train_file(self, path):
        """
        Insert every non-empty line of `path`.
        Lines the trie rejects are skipped and counted; running out of
        nodes stops the run. Returns (inserted, skipped), or None when the
        file could not be read or the node budget ran out.
        """
        inserted = skipped = 0
        try:
            with self.log.time_block(f"train {path}") as t, open(path, "r", encoding="utf8") as f:
                for raw in f:
                    line = raw.rstrip("\r\n")
                    if not line.strip():
                        continue
                    try:
                        self.trie.insert(line)
                        inserted += 1
                    except AllocationError:
                        raise
                    except PrefixTrieError as e:
                        skipped += 1
                        self.log.debug(f"skipped line: {e}")
        except OSError as e:
            self.log.error(f"cannot read {path}: {e}")
            self.out(f"err: {e}")
            return None
        except AllocationError as e:
            self.out(f"err: {e} (after {inserted} lines)")
            return None
        self.metrics.record("train_file_time", t.elapsed)
        self.out(f"trained on {inserted} lines ({skipped} skipped) in {t.elapsed:.2f}s")
        return inserted, skipped

    def _dump(self):
        self.console.print(self._dump_table())

    def _dump_table(self):
        table = Table(title="stored words", box=box.SIMPLE)
        table.add_column("word")
        table.add_column("freq", justify="right")
        for word, freq in self.trie.dump_rows():
            table.add_row(word, str(freq))
        return table

    def _stats(self):
        table = Table(title="stats", box=box.SIMPLE)
        table.add_column("metric")
        table.add_column("value", justify="right")
        for k, v in self.trie.stats().items():
            table.add_row(k, str(v))
        for k, n, avg in self.metrics.items():
            table.add_row(f"{k} (avg of {n})", f"{avg * 1000:.3f} ms")
        self.console.print(table)

    def _config(self, parts):
        if not parts:
            for k, v in self.cfg.show():
                self.out(f"{k:15} = {v}")
        elif len(parts) == 2:
            try:
                self.cfg.set(parts[0], parts[1])
            except (KeyError, ValueError) as e:
                self.out(f"err: {e}")
                return
            if parts[0] == "log_level":
                self.log.set_level(self.cfg.get("log_level"))
            if parts[0] == "max_nodes":
                # the live trie keeps the budget it was created with
                self.out(f"max_nodes = {self.cfg.get('max_nodes')} (applies to the next session)")
                return
            self.out(f"{parts[0]} = {self.cfg.get(parts[0])}")
        else:
            self.out("usage: /config [key val]")


def build_parser():
    p = argparse.ArgumentParser(
        prog="prefix-autocomplete",
        description="Learn strings and autocomplete prefixes by insertion frequency.",
    )
    p.add_argument("--config", help="JSON config file")
    p.add_argument("--train", action="append", default=[], metavar="FILE",
                   help="insert every non-empty line of FILE (repeatable)")
    p.add_argument("--complete", action="append", metavar="PREFIX",
                   help="print the completion of PREFIX and exit (repeatable)")
    p.add_argument("--max-nodes", type=int, help="node budget, 0 = unbounded")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    p.add_argument("--log-file", help="append log lines to this file")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)

    cfg = Config(args.config)
    try:
        if args.max_nodes is not None:
            cfg.override("max_nodes", args.max_nodes)
        if args.log_level:
            cfg.override("log_level", args.log_level)
        if args.log_file:
            cfg.override("log_file", args.log_file)
    except ValueError as e:
        print(f"err: {e}", file=sys.stderr)
        return 2

    cli = CLI(cfg=cfg)
    try:
        for path in args.train:
            # interactive sessions carry on after a failed file
            if cli.train_file(path) is None and args.complete:
                return 1
        if not args.complete:
            cli.start()
            return 0
        for prefix in args.complete:
            cli.out(cli.complete(prefix))
    finally:
        cli.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

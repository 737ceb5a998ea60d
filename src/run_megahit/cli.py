# src/run_megahit/cli.py
from __future__ import annotations
import argparse, logging, pathlib, subprocess, sys

import yaml

from run_megahit import __version__
from run_megahit.assembly.jobs import LOG_DIR_NAME, MegahitOptions
from run_megahit.pipeline import RunConfig, run_assembly
from run_megahit.utility.utils import config_value, load_config, setup_logging

L = logging.getLogger("run_megahit")


def build_parser(cfg: dict | None = None) -> argparse.ArgumentParser:
    cfg = cfg or {}
    ap = argparse.ArgumentParser(
        prog="run_megahit",
        description="Pair up read files by sample and run MEGAHIT on each through GNU parallel")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-Q", "--query", nargs="+", required=True, metavar="FILE_OR_DIR",
                    help="Read files and/or directories (searched one level deep)")
    ap.add_argument("-o", "--out_dir", metavar="DIR",
                    default=config_value(cfg, "defaults", "out_dir"),
                    help="Output directory (default: ./megahit-out)")
    ap.add_argument("-J", "--num_concurrent_jobs", type=int, metavar="INT",
                    default=config_value(cfg, "defaults", "num_concurrent_jobs", 8),
                    help="Number of concurrent jobs for parallel (default: %(default)s)")
    ap.add_argument("-H", "--num_halt", type=int, metavar="INT",
                    default=config_value(cfg, "defaults", "num_halt", 0),
                    help="Halt after this many failing jobs, 0 = never (default: %(default)s)")

    mh = ap.add_argument_group(title="megahit options", description="passed through only when set")
    mh.add_argument("--min_count", type=int, metavar="INT",
                    help="minimum multiplicity for filtering (k_min+1)-mers")
    mh.add_argument("--k_min", type=int, metavar="INT",
                    help="minimum kmer size (<= 255), must be odd number")
    mh.add_argument("--k_max", type=int, metavar="INT",
                    help="maximum kmer size (<= 255), must be odd number")
    mh.add_argument("--k_step", type=int, metavar="INT",
                    help="increment of kmer size of each iteration (<= 28), must be even number")
    mh.add_argument("--k_list", metavar="STR",
                    help="comma-separated list of kmer sizes; overrides --k_min/--k_max/--k_step")
    mh.add_argument("--min_contig_len", type=int, metavar="INT",
                    help="minimum length of contigs to output")
    mh.add_argument("-m", "--memory", type=float, metavar="FLOAT",
                    help="amount (bytes) or fraction of machine memory for MEGAHIT")
    mh.add_argument("--megahit", metavar="PATH",
                    default=config_value(cfg, "tools", "megahit", "megahit"),
                    help="MEGAHIT executable (default: %(default)s)")

    ap.add_argument("--dry-run", action="store_true",
                    help="Print the job lines and write the manifest without running anything")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="-v: info, -vv: debug")
    return ap


def main(argv: list[str] | None = None) -> None:
    try:
        cfg = load_config()
        args = build_parser(cfg).parse_args(argv)

        out_dir = (pathlib.Path(args.out_dir).expanduser() if args.out_dir
                   else pathlib.Path.cwd() / "megahit-out")

        level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
        setup_logging(out_dir / LOG_DIR_NAME, level=level, warn_if_generated=False)

        config = RunConfig(
            query=args.query,
            out_dir=out_dir,
            num_concurrent_jobs=args.num_concurrent_jobs,
            num_halt=args.num_halt,
            options=MegahitOptions(
                min_count=args.min_count,
                k_min=args.k_min,
                k_max=args.k_max,
                k_step=args.k_step,
                k_list=args.k_list,
                min_contig_len=args.min_contig_len,
                memory=args.memory,
            ),
            megahit_exe=args.megahit,
            parallel_exe=config_value(cfg, "tools", "parallel", "parallel"),
            dry_run=args.dry_run,
        )
        run_assembly(config)
    except (OSError, ValueError, yaml.YAMLError, subprocess.CalledProcessError) as e:
        L.error("Error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()

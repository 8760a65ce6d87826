"""Command-line interface for dir2wix.

This module provides the command-line interface for dir2wix, which harvests a
directory tree into a WiX source fragment. It handles argument parsing, logging
setup, atomic output writing and the translation of harvest errors into messages
and exit codes.

Key Features:
    - WiX 3 and WiX 4 source fragments with path-derived, reproducible ids
    - Exclusion rules in gitignore syntax from files and inline patterns
    - Extension-based exclusion
    - Dry-run tree preview and summary reporting
    - Atomic output: a failed run never leaves a partial document behind

Exit Codes:
    0: Successful completion
    1: Runtime error during execution (missing root, I/O error, write failure)
    2: Invalid command-line arguments or rule sources
    126: Permission denied while traversing the directory tree
    130: Interrupted by SIGINT (Ctrl+C)

Example:
    # Basic usage
    $ dir2wix build/output -o Files.wxs

    # With a rule source and a summary
    $ dir2wix build/output -o Files.wxs -e .wixignore -s

    # Display version information
    $ dir2wix --version
"""

import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import List, Optional

from humanfriendly import format_size

from dir2wix.cli.argparser import create_parser, validate_args
from dir2wix.cli.atomic_writer import AtomicWriter, temp_file_affixes
from dir2wix.exceptions import HarvestError, InvalidArgumentsError, TraversalError
from dir2wix.exclusion_rules.base_rules import BaseExclusionRules
from dir2wix.exclusion_rules.composite_rules import CompositeExclusionRules
from dir2wix.exclusion_rules.extension_rules import ExtensionExclusionRules
from dir2wix.exclusion_rules.git_rules import GitIgnoreExclusionRules
from dir2wix.exclusion_rules.path_rules import PathExclusionRules
from dir2wix.harvester import Harvester, preprocessor_reference
from dir2wix.output_strategies.wix_strategy import WixOutputStrategy

logger = logging.getLogger(__name__)


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr at a level chosen by the number of -v flags."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def format_counts(counts: Mapping[str, int]) -> str:
    """Format the harvest counts into a human-readable string.

    Args:
        counts: Mapping with 'directories', 'files' and 'bytes'.

    Returns:
        A formatted string showing all counts with appropriate labels.

    Example:
        >>> print(format_counts({"directories": 2, "files": 5, "bytes": 1500000}))
        Directories: 2
        Files: 5
        Total size: 1.5 MB
    """
    return "\n".join(
        [
            f"Directories: {counts['directories']}",
            f"Files: {counts['files']}",
            f"Total size: {format_size(counts['bytes'])}",
        ]
    )


def output_exclusion_rules(output: Path, directory: Path) -> Optional[PathExclusionRules]:
    """Build rules that keep the output document out of its own harvest.

    When the output lies inside the harvested directory, both the document and the
    temporary file it is written through would otherwise be picked up by the walk.

    Returns:
        Rules excluding the output file and its temporary siblings, or None if the
        output lies outside the harvested directory.

    Example:
        >>> rules = output_exclusion_rules(Path("dist/setup/Files.wxs"), Path("dist"))
        >>> rules.exclude("setup/Files.wxs"), rules.exclude("setup/.Files.wxs.abc123.tmp")
        (True, True)
        >>> output_exclusion_rules(Path("Files.wxs"), Path("dist")) is None
        True
    """
    try:
        relative = output.resolve().relative_to(directory.resolve())
    except ValueError:
        return None
    if relative == Path("."):
        return None

    parent = relative.parent.as_posix()
    prefix, suffix = temp_file_affixes(output)
    rules = PathExclusionRules()
    rules.add_path(relative.as_posix())
    rules.add_name_pattern("" if parent == "." else parent, prefix, suffix)
    return rules


def build_exclusion_rules(
    git_rules: GitIgnoreExclusionRules,
    exclude_extensions: Optional[str],
    output_rules: Optional[BaseExclusionRules] = None,
) -> Optional[BaseExclusionRules]:
    """Combine the gitignore rules collected during parsing with the other rule kinds.

    Args:
        git_rules: Rules from rule sources and inline patterns.
        exclude_extensions: Semicolon-separated extension list, if given.
        output_rules: Rules keeping the output document out of the harvest, if any.

    Returns:
        None if no rule of any kind is configured, the single configured rule
        object, or a composite of all of them.
    """
    rules: List[BaseExclusionRules] = []
    if git_rules.has_rules():
        rules.append(git_rules)
    if exclude_extensions:
        extension_rules = ExtensionExclusionRules(exclude_extensions)
        if extension_rules.has_rules():
            rules.append(extension_rules)
    if output_rules is not None and output_rules.has_rules():
        rules.append(output_rules)

    if not rules:
        return None
    if len(rules) == 1:
        return rules[0]
    return CompositeExclusionRules(rules)


def main() -> None:
    """Main entry point for the dir2wix command-line interface.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Invalid command-line arguments or rule sources
        126: Permission denied while traversing
        130: Interrupted by SIGINT (Ctrl+C)
    """
    try:
        # Populated in command-line order while parsing
        git_rules = GitIgnoreExclusionRules()

        parser = create_parser(git_rules)
        args = parser.parse_args()

        configure_logging(args.verbose)
        validate_args(args)

        if args.source_prefix is not None:
            reference_root = args.source_prefix
        else:
            reference_root = preprocessor_reference(args.preprocessor_variable.strip())

        strategy = WixOutputStrategy(wix_version=args.wix_version)
        output_rules = None
        if args.output is not None:
            if args.output.suffix.lower() != strategy.get_file_extension():
                logger.warning(
                    "Output file %s does not have the %s extension", args.output, strategy.get_file_extension()
                )
            output_rules = output_exclusion_rules(args.output, args.directory)

        harvester = Harvester(
            args.directory,
            reference_root=reference_root,
            root_ref_id=args.directory_ref,
            component_group=args.component_group,
            exclusion_rules=build_exclusion_rules(git_rules, args.exclude_extensions, output_rules),
            output_strategy=strategy,
        )

        if args.dry_run:
            for line in harvester.stream_tree_representation():
                print(line)
        else:
            with AtomicWriter(args.output) as writer:
                for chunk in harvester.stream_document():
                    writer.write(chunk)
            logger.info("Wrote %s", args.output)

        if args.summary:
            counts = {
                "directories": harvester.directory_count,
                "files": harvester.file_count,
                "bytes": harvester.total_size,
            }
            print(format_counts(counts), file=sys.stderr)

    except InvalidArgumentsError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(2)
    except TraversalError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(126 if e.is_permission_error else 1)
    except HarvestError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Command-line argument parsing for dir2wix.

This module defines the command-line interface for dir2wix,
handling argument parsing and validation.
"""

import argparse
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from dir2wix import __version__
from dir2wix.exceptions import InvalidArgumentsError
from dir2wix.exclusion_rules.base_rules import BaseExclusionRules
from dir2wix.harvester import DEFAULT_COMPONENT_GROUP, DEFAULT_DIRECTORY_REF, DEFAULT_PREPROCESSOR_VARIABLE
from dir2wix.identifiers import is_valid_identifier


def create_exclusion_action(exclusion_rules: BaseExclusionRules) -> Type[argparse.Action]:
    """Create a custom action class for handling exclusion rules.

    This factory function creates an action class that will update the provided
    exclusion rules object as arguments are processed. This preserves the exact
    order of rule sources and inline patterns as they appear on the command line,
    which matters because later rules override earlier ones.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class ExclusionRulesAction(argparse.Action):
        """Action to update exclusion rules as arguments are processed."""

        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return

            if option_string in ("-e", "--exclude"):
                exclusion_rules.load_rules(Path(str(values)))
            else:  # -i/--ignore
                exclusion_rules.add_rule(str(values))

            recorded = getattr(namespace, self.dest, None) or []
            setattr(namespace, self.dest, recorded + [values])

    return ExclusionRulesAction


def create_parser(exclusion_rules: BaseExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        An ArgumentParser instance configured with dir2wix's options.
    """
    description = """
    dir2wix: Harvest a directory tree into a WiX source fragment.

    Every file that is not excluded becomes a component holding one file, every
    directory a Directory element, nested under a reference to an existing
    directory. All components are also listed in a component group.

    Identifiers are derived from paths only: harvesting an unchanged tree always
    produces the same ids, and changing the tree only changes the ids of the
    entries that moved, appeared or disappeared.
    """

    epilog = """
    Examples:
      # Harvest a build output directory
      dir2wix build/output -o Files.wxs

      # Exclude entries using a gitignore-style rule source
      dir2wix build/output -o Files.wxs -e .wixignore

      # Inline patterns, applied in command-line order with rule sources
      dir2wix build/output -o Files.wxs -i "*.log" -i "!install.log" -i "obj/"

      # Skip debug symbols by extension
      dir2wix build/output -o Files.wxs -x ".pdb;.ilk"

      # Attach to another directory and name the component group
      dir2wix build/output -o Files.wxs -d APPDIR -g AppFiles -p var.AppSource

      # Preview what would be harvested
      dir2wix -n -e .wixignore build/output

      # Print a summary to stderr
      dir2wix build/output -o Files.wxs -s
    """

    parser = argparse.ArgumentParser(
        prog="dir2wix",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"dir2wix {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(exclusion_rules)

    parser.add_argument(
        "directory",
        type=Path,
        help="The directory to harvest. Source paths in the output are relative to this directory.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output .wxs file. Required unless -n/--dry-run is given.",
    )

    reference = parser.add_mutually_exclusive_group()
    reference.add_argument(
        "-p",
        "--preprocessor-variable",
        metavar="NAME",
        default=DEFAULT_PREPROCESSOR_VARIABLE,
        help=(
            "Preprocessor variable prefixing every Source path as $(NAME) "
            f"(default: {DEFAULT_PREPROCESSOR_VARIABLE})."
        ),
    )
    reference.add_argument(
        "--source-prefix",
        metavar="PREFIX",
        help="Literal prefix for every Source path, used instead of a preprocessor variable.",
    )

    parser.add_argument(
        "-g",
        "--component-group",
        metavar="NAME",
        default=DEFAULT_COMPONENT_GROUP,
        help=f"Id of the component group listing all components (default: {DEFAULT_COMPONENT_GROUP}).",
    )
    parser.add_argument(
        "-d",
        "--directory-ref",
        metavar="ID",
        default=DEFAULT_DIRECTORY_REF,
        help=f"Id of the directory the harvested tree is installed into (default: {DEFAULT_DIRECTORY_REF}).",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="FILE",
        action=ExclusionAction,
        help="Rule source in gitignore syntax (e.g. .wixignore). Can be specified multiple times.",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        type=str,
        metavar="PATTERN",
        action=ExclusionAction,
        help=(
            "Individual gitignore-style pattern to exclude files and directories, including wildcards "
            "(*.log), directory markers (obj/), anchors (/config.yml) and negations (!keep.log). Can be "
            "specified multiple times; patterns are applied in the order they appear, mixed with -e/--exclude."
        ),
    )
    parser.add_argument(
        "-x",
        "--exclude-extensions",
        metavar="LIST",
        help="Semicolon-separated file extensions to exclude (e.g. '.pdb;.obj').",
    )
    parser.add_argument(
        "--wix-version",
        type=int,
        choices=[3, 4],
        default=3,
        help="WiX schema version of the output (default: 3).",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Print the harvested tree with its identifiers instead of writing an output file.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        action="store_true",
        help="Print a summary of harvested directories, files and total size to stderr.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr; repeat for debug output including every excluded path.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        InvalidArgumentsError: If any arguments fail validation.
    """
    if not args.dry_run and args.output is None:
        raise InvalidArgumentsError("-o/--output is required unless -n/--dry-run is given")

    if not is_valid_identifier(args.directory_ref):
        raise InvalidArgumentsError(f"{args.directory_ref!r} is not a valid identifier", "--directory-ref")

    if not is_valid_identifier(args.component_group):
        raise InvalidArgumentsError(f"{args.component_group!r} is not a valid identifier", "--component-group")

    if args.source_prefix is None and not args.preprocessor_variable.strip():
        raise InvalidArgumentsError("must not be empty", "--preprocessor-variable")

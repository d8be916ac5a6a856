# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from collections.abc import Sequence
from typing import NoReturn

import click
from click_option_group import optgroup

from qalter_lib.alter.builder import AttributeBuilder
from qalter_lib.alter.classifier import ErrorClassifier
from qalter_lib.alter.dispatcher import Dispatcher
from qalter_lib.channel import ChannelMeta
from qalter_lib.core.click_format import OPTION_ORDER, QalterCommand
from qalter_lib.core.common import print_usage, to_exit_status
from qalter_lib.core.config import CFG
from qalter_lib.core.error import QalterError
from qalter_lib.core.logger import get_logger
from qalter_lib.properties.attributes import OptionLookup

__version__ = "0.1.0"

logger = get_logger(__name__)

# only --help; -h is used for hold types
_CONTEXT_SETTINGS = {"help_option_names": ["--help"]}

# option letter of each parameter name
OPTION_LETTERS: dict[str, str] = {
    "execution_time": "a",
    "account": "A",
    "checkpoint": "c",
    "error_path": "e",
    "hold": "h",
    "join": "j",
    "keep": "k",
    "array_range": "J",
    "resources": "l",
    "mail_points": "m",
    "mail_users": "M",
    "job_name": "N",
    "output_path": "o",
    "priority": "p",
    "rerunable": "r",
    "shell": "S",
    "user_list": "u",
    "extended": "W",
    "project": "P",
}


@click.command(
    short_help="Alter a batch job.",
    help=f"""Alter attributes of one or more batch jobs.

{click.style("JOB_IDENTIFIER", fg="green")}   One or more identifiers of jobs to alter,
in the form `seq[.server][@server]`.

Each option sets one attribute of all the specified jobs. The request is sent to the
server managing each job; jobs that moved to another server are located and the
request is repeated there.""",
    cls=QalterCommand,
    help_options_color="bright_blue",
    context_settings=_CONTEXT_SETTINGS,
)
@click.argument(
    "job_ids",
    nargs=-1,
    type=str,
    metavar=click.style("JOB_IDENTIFIER...", fg="green"),
)
@optgroup.group(f"{click.style('Scheduling', fg='yellow')}")
@optgroup.option(
    "-a",
    "execution_time",
    multiple=True,
    metavar="date_time",
    help="Time after which the job is eligible for execution, as [[[[CC]YY]MM]DD]hhmm[.SS].",
)
@optgroup.option(
    "-h",
    "hold",
    multiple=True,
    metavar="hold_list",
    help="Hold types to apply to the job.",
)
@optgroup.option(
    "-p",
    "priority",
    multiple=True,
    metavar="priority",
    help="Priority of the job.",
)
@optgroup.option(
    "-r",
    "rerunable",
    multiple=True,
    metavar="y|n",
    help="Whether the job can be rerun.",
)
@optgroup.option(
    "-c",
    "checkpoint",
    multiple=True,
    metavar="interval",
    help="Checkpoint interval.",
)
@optgroup.option(
    "-J",
    "array_range",
    multiple=True,
    metavar="X-Y[:Z]",
    help="Array indices of an array job.",
)
@optgroup.group(f"{click.style('Resources and accounting', fg='yellow')}")
@optgroup.option(
    "-l",
    "resources",
    multiple=True,
    metavar="resource_list",
    help="Comma-separated list of resource requests, e.g. `walltime=1:00:00,mem=4gb`.",
)
@optgroup.option(
    "-A",
    "account",
    multiple=True,
    metavar="account_string",
    help="Account to charge the job to.",
)
@optgroup.option(
    "-P",
    "project",
    multiple=True,
    metavar="project_name",
    help="Project the job belongs to.",
)
@optgroup.option(
    "-u",
    "user_list",
    multiple=True,
    metavar="user_list",
    help="Users to run the job as.",
)
@optgroup.group(f"{click.style('Output and notifications', fg='yellow')}")
@optgroup.option(
    "-e",
    "error_path",
    multiple=True,
    metavar="path",
    help="Path of the standard error file.",
)
@optgroup.option(
    "-o",
    "output_path",
    multiple=True,
    metavar="path",
    help="Path of the standard output file.",
)
@optgroup.option(
    "-j",
    "join",
    multiple=True,
    metavar="join",
    help="Join standard output and standard error.",
)
@optgroup.option(
    "-k",
    "keep",
    multiple=True,
    metavar="keep",
    help="Output files to keep on the execution host.",
)
@optgroup.option(
    "-m",
    "mail_points",
    multiple=True,
    metavar="mail_options",
    help="Events to send mail about.",
)
@optgroup.option(
    "-M",
    "mail_users",
    multiple=True,
    metavar="user_list",
    help="Recipients of the mail.",
)
@optgroup.group(f"{click.style('Other', fg='yellow')}")
@optgroup.option(
    "-N",
    "job_name",
    multiple=True,
    metavar="jobname",
    help="Name of the job.",
)
@optgroup.option(
    "-S",
    "shell",
    multiple=True,
    metavar="path",
    help="Shell used to interpret the job script.",
)
@optgroup.option(
    "-W",
    "extended",
    multiple=True,
    metavar="dependency_list",
    help=(
        "Comma-separated `keyword=value` pairs setting further attributes:\n"
        "depend, stagein, stageout, sandbox, umask, run_count, group_list."
    ),
)
@click.option(
    "--version",
    is_flag=True,
    help="Print the current version of qalter and exit.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    job_ids: tuple[str, ...],
    version: bool,
    **options: tuple[str, ...],
) -> NoReturn:
    """
    Alter attributes of the specified batch jobs.

    Options are applied in the order in which they appear on the command line.
    `--version` is only honoured when it is the sole argument.

    Exit codes
        0 if all jobs were altered, 2 on invalid options or an option value
        refused by the server, otherwise the code of the last failed job.
    """
    if version:
        if job_ids or any(options.values()):
            print_usage()
            sys.exit(CFG.exit_codes.usage)

        print(__version__)
        sys.exit(0)

    try:
        builder = build_edits(options, ctx.meta.get(OPTION_ORDER, []))
        if builder.errors or not job_ids:
            print_usage()
            sys.exit(CFG.exit_codes.usage)

        sys.exit(to_exit_status(alter_jobs(job_ids, builder)))
    except QalterError as e:
        logger.error(e)
        sys.exit(e.exit_code)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)


def build_edits(
    options: dict[str, tuple[str, ...]], order: Sequence[str]
) -> AttributeBuilder:
    """
    Translate parsed options into attribute edits.

    Args:
        options (dict[str, tuple[str, ...]]): Values of each option, keyed by parameter name.
        order (Sequence[str]): Parameter names in the order of their occurrence on
            the command line, one entry per occurrence.

    Returns:
        AttributeBuilder: Builder holding the edits and the number of rejected values.
    """
    values = {name: iter(options.get(name) or ()) for name in OPTION_LETTERS}
    builder = AttributeBuilder()
    for name in order:
        if name in OPTION_LETTERS:
            builder.add(OPTION_LETTERS[name], next(values[name]))

    return builder


def alter_jobs(job_ids: Sequence[str], builder: AttributeBuilder) -> int:
    """
    Send the alteration request for all jobs.

    Args:
        job_ids (Sequence[str]): Job identifiers as supplied on the command line.
        builder (AttributeBuilder): Builder holding the attribute edits.

    Returns:
        int: Exit code of the last failed job, zero if all jobs were altered.

    Raises:
        QalterError: If no channel is available or the security library cannot be initialized.
    """
    channel = ChannelMeta.obtain()
    logger.debug(f"Using channel '{str(channel)}'.")

    channel.initSecurity()
    try:
        dispatcher = Dispatcher(
            channel, builder.edits, ErrorClassifier(OptionLookup.default(), channel)
        )
        outcome = dispatcher.run(job_ids)
    finally:
        channel.closeSecurity()

    return outcome

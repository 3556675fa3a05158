"""
Command-line interface for the checkup recommender.
"""
import json
import sys
import typing

import click

from .config import Settings, get_settings
from .display import band_caption, gender_badge, priority_label
from .engine import get_engine
from .lifestyle import LIFESTYLE_TAGS
from .log import setup_logger
from .profile import LifestyleTagKey, build_profile
from .reference import ReferenceDataError
from .session import NO_RISK_MESSAGE, VALIDATION_MESSAGE

TAG_CHOICES = [k.value for k in LifestyleTagKey]


@click.group()
@click.option("--log-level", default=None, help="override CHECKUP_LOG_LEVEL (e.g. DEBUG)")
@click.pass_context
def main(ctx, log_level: typing.Optional[str]):
    """Personalized health-checkup list and disease risk hints."""
    settings = get_settings()
    # stderr keeps --json output on stdout clean
    setup_logger(level=(log_level or settings.log_level).upper(), stream=sys.stderr)
    ctx.obj = settings


@main.command(name="tags")
def tags():
    """List the lifestyle tags that can be passed to `plan --tag`."""
    for tag in LIFESTYLE_TAGS:
        click.echo(f"{tag.key.value:15} {tag.label}  ({', '.join(tag.disease_tags)})")


@main.command(name="plan")
@click.option("-a", "--age", "age", required=True, type=str, help="age in years")
@click.option("-g", "--gender", "gender", type=click.Choice(["male", "female", "unspecified"]),
              default="unspecified", show_default=True)
@click.option("-t", "--tag", "tag_keys", multiple=True, type=click.Choice(TAG_CHOICES),
              help="lifestyle tag; repeat for several")
@click.option("--json", "as_json", is_flag=True, help="print the result as JSON")
@click.pass_obj
def plan(settings: Settings, age: str, gender: str, tag_keys: typing.Tuple[str, ...], as_json: bool):
    """Generate the checkup list and risk hints for one profile."""
    try:
        engine = get_engine(settings)
    except ReferenceDataError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    profile = build_profile(age, gender, tag_keys)
    result = engine.generate(profile)

    if as_json:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        # same exit codes as text mode
        sys.exit(0 if result.valid else 2)

    if not result.valid:
        click.echo(VALIDATION_MESSAGE, err=True)
        sys.exit(2)

    band = band_caption(profile.age, engine.tables.sections)
    click.echo(f"必查体检项目（{band}）：" if band else "必查体检项目：")
    if not result.checkups:
        click.echo("  (该年龄段暂无基础体检项目)")
    for i, item in enumerate(result.checkups, 1):
        click.echo(f"  {i}. {item.title}  [{priority_label(item.priority)}]")

    click.echo("")
    click.echo("潜在患病风险：")
    if not result.has_risks:
        click.echo(f"  {NO_RISK_MESSAGE}")
    for disease in result.risks:
        click.echo(f"  - {disease.name} ({disease.category}, {gender_badge(disease.gender)})")


if __name__ == "__main__":
    main()

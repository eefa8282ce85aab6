"""
CLI 命令：arise
本地查看与完成每日任务
"""
import click

from core.config_manager import config
from core.daily_service import DailyService
from core.exceptions import AriseError
from core.logger import setup_logging
from scheduler.daily_tick import MidnightResetScheduler


def _service(ctx: click.Context) -> DailyService:
    return ctx.obj["service"]


def _fail(error: AriseError) -> None:
    click.echo(f"❌ {error.get_user_message()}", err=True)
    raise SystemExit(1)


@click.group()
@click.option("--user", "user_id", default=None, help="User id (defaults to DEFAULT_USER_ID)")
@click.pass_context
def arise(ctx: click.Context, user_id):
    """Arise daily tasks and progression"""
    ctx.ensure_object(dict)
    ctx.obj.setdefault("service", DailyService())
    ctx.obj["user_id"] = user_id or config.DEFAULT_USER_ID
    if not ctx.obj.get("skip_logging"):
        setup_logging()


@arise.command()
@click.pass_context
def today(ctx: click.Context):
    """Show today's tasks"""
    try:
        snapshot = _service(ctx).today(ctx.obj["user_id"])
    except AriseError as e:
        _fail(e)

    summary = snapshot.to_dict()["summary"]
    click.echo(f"📅 {snapshot.day.isoformat()}  🔥 streak {snapshot.streak}")
    if not snapshot.tasks:
        click.echo("ℹ️ No tasks today. Set your preferences first.")
        return
    for task in snapshot.tasks:
        mark = "✅" if task.is_completed else "⬜"
        click.echo(f"  {mark} {task.name} (+{task.xp} XP) - {task.description}  [{task.id}]")
    click.echo(
        f"\n{summary['completed']}/{summary['total']} done, "
        f"{summary['xp_earned']}/{summary['xp_possible']} XP"
    )


@arise.command()
@click.argument("task_id")
@click.pass_context
def complete(ctx: click.Context, task_id: str):
    """Mark a task as done"""
    try:
        outcome = _service(ctx).complete_task(ctx.obj["user_id"], task_id)
    except AriseError as e:
        _fail(e)

    if not outcome.changed:
        click.echo(f"ℹ️ Nothing to complete for {task_id}")
        return
    click.echo(f"✅ {outcome.task.name} +{outcome.xp_awarded} XP (total {outcome.total_xp})")
    if outcome.streak_incremented:
        click.echo(f"🔥 All tasks done! Streak: {outcome.streak}")
    if outcome.rank_up:
        click.echo(f"🏅 New rank: {outcome.rank}")
    for achievement_id in outcome.unlocked_achievements:
        click.echo(f"🏆 Achievement unlocked: {achievement_id}")


@arise.command()
@click.pass_context
def progress(ctx: click.Context):
    """Show rank, skills and achievements"""
    try:
        summary = _service(ctx).progress_summary(ctx.obj["user_id"])
    except AriseError as e:
        _fail(e)

    click.echo(f"🏅 {summary['rank']['name'].upper()}  {summary['xpDisplay']}")
    click.echo(f"🧭 Journey {summary['journeyProgress']:.0%}  🔥 streak {summary['streak']}")
    click.echo("\n[Skills]")
    for skill in summary["skills"]:
        click.echo(f"  {skill['name']:<11} Lv {skill['level']:<2} {skill['xp']:>5} XP  {skill['progress']:.0%}")
    click.echo(f"\nBest: {summary['bestSkill']}  Attention: {summary['attentionSkill']}")
    unlocked = [a for a in summary["achievements"] if a["unlocked"]]
    click.echo(f"🏆 {len(unlocked)}/{len(summary['achievements'])} achievements")


@arise.command("reset-streak")
@click.confirmation_option(prompt="⚠️ Reset your streak to 0?")
@click.pass_context
def reset_streak(ctx: click.Context):
    """Reset the streak to 0"""
    try:
        previous = _service(ctx).reset_streak(ctx.obj["user_id"])
    except AriseError as e:
        _fail(e)
    click.echo(f"Streak reset (was {previous})")


@arise.command()
@click.pass_context
def tick(ctx: click.Context):
    """Run the midnight reset check once"""
    scheduler = MidnightResetScheduler(_service(ctx), ctx.obj["user_id"])
    try:
        reset = scheduler.on_timer()
    except AriseError as e:
        _fail(e)
    click.echo("🌅 New day, tasks regenerated" if reset else "Already up to date")


if __name__ == "__main__":
    arise()

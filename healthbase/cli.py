import argparse
import json
import logging
import sys
from datetime import date


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from None


def cmd_db_init(args):
    from healthbase.db import init_db
    from healthbase.config import load_config

    try:
        config = load_config()
    except FileNotFoundError:
        config = None
    init_db(config)


def cmd_activities(args):
    from healthbase.config import load_config
    from healthbase.ingest.healthkit_sync import get_activities_for_date, get_activities_for_date_range
    from healthbase.analysis.activity_list import filter_activities

    if args.date and (args.start or args.end):
        print("Use either --date or --start/--end, not both.")
        sys.exit(1)

    try:
        config = load_config() if not args.file else {}
        if args.start or args.end:
            if not (args.start and args.end):
                print("Both --start and --end are required for a date range.")
                sys.exit(1)
            activities = get_activities_for_date_range(config, args.start, args.end, file_path=args.file)
        else:
            day = args.date or date.today()
            activities = get_activities_for_date(config, day, file_path=args.file)
    except (FileNotFoundError, KeyError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    activities = filter_activities(activities, args.type)

    if args.json:
        from healthbase.analysis.display import display_fields
        print(json.dumps([display_fields(a) for a in activities], indent=2))
        return

    _print_activities(activities, show_total=bool(args.start))


def _print_activities(activities, show_total: bool = False):
    from healthbase.analysis.display import format_duration, format_metric, format_pace

    if not activities:
        print("No activities found.")
        return

    for a in activities:
        line = (f"  {a.start_time[:16]:16s}  {a.display_name:32s} {format_duration(a.duration_s):>7s}"
                f"  {format_metric(a):>10s}")
        if a.avg_pace_s_per_km:
            line += f"  {format_pace(a.avg_pace_s_per_km)}"
        if a.avg_hr:
            line += f"  {a.avg_hr}bpm"
        if show_total and a.total_calories is not None:
            marker = "~" if a.total_calories_estimated else ""
            line += f"  total {marker}{a.total_calories}KCAL"
        print(line)
    print(f"\n{len(activities)} activit{'y' if len(activities) == 1 else 'ies'}")


def cmd_settings(args):
    from healthbase.config import load_config
    from healthbase.db import get_connection
    from healthbase.models import MacroSplit, MacroTargets
    from healthbase import settings

    try:
        config = load_config()
    except FileNotFoundError:
        config = None
    conn = get_connection(config)

    if args.settings_command == "set-calories":
        settings.save_calorie_target(conn, args.calories)
        print(f"Calorie target set to {args.calories} kcal")

    elif args.settings_command == "set-macros":
        calories = settings.load_calorie_target(conn) or 0
        targets = MacroTargets(calories=calories, protein=args.protein, carbs=args.carbs, fats=args.fats)
        settings.save_macro_targets(conn, targets)
        settings.save_macro_mode(conn, "grams")
        print(f"Macro targets set: P {args.protein}g  C {args.carbs}g  F {args.fats}g")

    elif args.settings_command == "set-split":
        total = args.protein + args.carbs + args.fats
        if abs(total - 100) > 0.01:
            print(f"Split must add up to 100% (got {total:g}%).")
            conn.close()
            sys.exit(1)
        split = MacroSplit(protein_pct=args.protein, carbs_pct=args.carbs, fats_pct=args.fats)
        settings.save_macro_split(conn, split)
        settings.save_macro_mode(conn, "percent")
        calories = settings.load_calorie_target(conn)
        if calories:
            grams = settings.calculate_grams_from_calories_and_split(calories, split)
            settings.save_macro_targets(conn, grams)
            print(f"Macro split set: P {grams.protein}g  C {grams.carbs}g  F {grams.fats}g "
                  f"of {grams.calories} kcal")
        else:
            print("Macro split set. Set a calorie target to derive gram targets.")

    elif args.settings_command == "set-mode":
        settings.save_macro_mode(conn, args.mode)
        print(f"Macro mode set to {args.mode}")

    else:
        current = settings.load_all(conn)
        print("Settings:")
        print(f"  Calorie target: {current['calorie_target'] or '-'}")
        targets = current["macro_targets"]
        if targets:
            print(f"  Macro targets:  P {targets['protein']}g  C {targets['carbs']}g  F {targets['fats']}g")
        split = current["macro_split"]
        if split:
            print(f"  Macro split:    P {split['protein_pct']:g}%  C {split['carbs_pct']:g}%  "
                  f"F {split['fats_pct']:g}%")
        print(f"  Macro mode:     {current['macro_mode'] or '-'}")

    conn.close()


def cmd_today(args):
    from healthbase.config import load_config
    from healthbase.db import get_connection
    from healthbase.ingest.health_samples import get_health_data_for_date
    from healthbase.analysis.today import today_summary
    from healthbase import settings

    try:
        config = load_config()
    except FileNotFoundError:
        config = {}

    day = args.date or date.today()
    try:
        health = get_health_data_for_date(config, day, file_path=args.file, workouts_file=args.workouts)
    except (FileNotFoundError, KeyError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    conn = get_connection(config or None)
    calorie_target = settings.load_calorie_target(conn)
    macro_targets = settings.load_macro_targets(conn)
    conn.close()

    summary = today_summary(health, calorie_target, macro_targets)
    if args.json:
        print(json.dumps(summary, indent=2))
        return
    _print_today(day, health, summary)


def _print_today(day, health, summary):
    from healthbase.analysis.display import format_minutes

    print(f"{day:%A, %B} {day.day}, {day.year}")
    print(f"  Steps:        {health.steps.total:,}")

    progress = summary["calorie_progress"]
    if summary["has_targets"]:
        left = "over" if progress["over"] else "remaining"
        print(f"  Calories:     {progress['consumed']:,} / {progress['goal']:,} kcal "
              f"({progress['progress_pct']}%), {progress['difference']:,} {left}")
        for macro in summary["macro_progress"]:
            print(f"  {macro['label'] + ':':13s} {macro['value']}g / {macro['goal']}g")
    else:
        print(f"  Calories:     {progress['consumed']:,} kcal")
        print("  Set calorie and macro targets with `healthbase settings` to track progress.")

    if health.energy:
        print(f"  Energy:       active {health.energy.active:,}  basal {health.energy.basal:,}  "
              f"total {health.energy.total:,} kcal")
    if health.water_l is not None:
        print(f"  Water:        {health.water_l:.2f} L")
    if health.sleep:
        print(f"  Sleep:        {format_minutes(health.sleep.asleep_min)} asleep, "
              f"{format_minutes(health.sleep.in_bed_min)} in bed")
    if health.heart_rate:
        parts = [f"{name} {value}" for name, value in (
            ("avg", health.heart_rate.average),
            ("resting", health.heart_rate.resting),
            ("walking", health.heart_rate.walking_average),
        ) if value is not None]
        print(f"  Heart rate:   {'  '.join(parts)} bpm")
    if health.mindfulness_min is not None:
        print(f"  Mindfulness:  {format_minutes(health.mindfulness_min)}")

    print()
    _print_activities(health.activities)


def cmd_review(args):
    from healthbase.config import load_config, get_review_address
    from healthbase.review.app import create_app

    config = load_config()
    host, port = get_review_address(config)
    app = create_app(config)
    app.run(host=args.host or host, port=args.port or port, debug=args.verbose)


def build_parser():
    parser = argparse.ArgumentParser(prog="healthbase", description="HealthBase — HealthKit activity dashboards")
    subparsers = parser.add_subparsers(dest="command")

    # db subcommand with its own subcommands
    db_parser = subparsers.add_parser("db", help="Database operations")
    db_sub = db_parser.add_subparsers(dest="db_command")
    db_init = db_sub.add_parser("init", help="Initialize the settings database")
    db_init.set_defaults(func=cmd_db_init)

    # activities subcommand
    act_parser = subparsers.add_parser("activities", help="List normalized activities")
    act_parser.add_argument("--date", type=_parse_day, help="Single day (default: today)")
    act_parser.add_argument("--start", type=_parse_day, help="Range start day")
    act_parser.add_argument("--end", type=_parse_day, help="Range end day (inclusive)")
    act_parser.add_argument("--type", default="all",
                            choices=["all", "running", "cycling", "hiit", "walking",
                                     "strength", "rowing", "football", "other"],
                            help="Filter by activity type")
    act_parser.add_argument("--file", help="Workout export JSON (default: paths.workouts_export)")
    act_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    act_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    act_parser.set_defaults(func=cmd_activities)

    # settings subcommand with sub-subcommands
    settings_parser = subparsers.add_parser("settings", help="Calorie and macro targets")
    settings_sub = settings_parser.add_subparsers(dest="settings_command")
    settings_sub.add_parser("show", help="Show current settings")
    cal_parser = settings_sub.add_parser("set-calories", help="Set daily calorie target")
    cal_parser.add_argument("calories", type=int)
    macros_parser = settings_sub.add_parser("set-macros", help="Set macro targets in grams")
    macros_parser.add_argument("protein", type=int)
    macros_parser.add_argument("carbs", type=int)
    macros_parser.add_argument("fats", type=int)
    split_parser = settings_sub.add_parser("set-split", help="Set macro split in percent")
    split_parser.add_argument("protein", type=float)
    split_parser.add_argument("carbs", type=float)
    split_parser.add_argument("fats", type=float)
    mode_parser = settings_sub.add_parser("set-mode", help="Set macro entry mode")
    mode_parser.add_argument("mode", choices=["percent", "grams"])
    settings_parser.set_defaults(func=cmd_settings)

    today_parser = subparsers.add_parser("today", help="Daily health summary and target progress")
    today_parser.add_argument("--date", type=_parse_day, help="Day (default: today)")
    today_parser.add_argument("--file", help="Health sample export JSON (default: paths.health_export)")
    today_parser.add_argument("--workouts", help="Workout export JSON (default: paths.workouts_export)")
    today_parser.add_argument("--json", action="store_true", help="Print JSON instead of a summary")
    today_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    today_parser.set_defaults(func=cmd_today)

    review_parser = subparsers.add_parser("review", help="Run the dashboard JSON API")
    review_parser.add_argument("--host", help="Bind address (default: review.host)")
    review_parser.add_argument("--port", type=int, help="Port (default: review.port)")
    review_parser.add_argument("-v", "--verbose", action="store_true", help="Flask debug mode")
    review_parser.set_defaults(func=cmd_review)

    return parser, db_parser


def main(argv=None):
    parser, db_parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)
    if args.command == "db" and not getattr(args, "db_command", None):
        db_parser.print_help()
        sys.exit(1)
    _configure_logging(getattr(args, "verbose", False))
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

from datetime import date

from flask import Flask, jsonify, request

from healthbase.analysis.activity_list import FILTERS, filter_activities, group_by_month
from healthbase.analysis.display import display_fields
from healthbase.analysis.today import today_summary
from healthbase.config import load_config
from healthbase.db import get_connection
from healthbase.ingest.health_samples import get_health_data_for_date
from healthbase.ingest.healthkit_sync import get_activities_for_date, get_activities_for_date_range
from healthbase.models import MacroSplit, MacroTargets
from healthbase import settings as settings_store


def create_app(config=None):
    app = Flask(__name__)

    if config is None:
        config = load_config()
    app.config["HEALTHBASE"] = config

    def _parse_day(value, name):
        try:
            return date.fromisoformat(value)
        except (TypeError, ValueError):
            raise ValueError(f"{name} must be YYYY-MM-DD") from None

    @app.errorhandler(ValueError)
    def handle_bad_request(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(FileNotFoundError)
    def handle_missing_export(e):
        return jsonify({"error": str(e)}), 404

    @app.route("/api/activities")
    def api_activities():
        day = request.args.get("date")
        start = request.args.get("start")
        end = request.args.get("end")
        activity_type = request.args.get("type", "all")
        if activity_type not in FILTERS:
            return jsonify({"error": f"type must be one of {', '.join(FILTERS)}"}), 400

        if day:
            activities = get_activities_for_date(config, _parse_day(day, "date"))
        elif start and end:
            activities = get_activities_for_date_range(
                config, _parse_day(start, "start"), _parse_day(end, "end"))
        else:
            return jsonify({"error": "date, or start and end, required"}), 400

        activities = filter_activities(activities, activity_type)
        if request.args.get("group") == "month":
            groups = group_by_month(activities)
            return jsonify([
                {"month": g["month"], "year": g["year"],
                 "activities": [display_fields(a) for a in g["activities"]]}
                for g in groups
            ])
        return jsonify([display_fields(a) for a in activities])

    @app.route("/api/today")
    def api_today():
        day_param = request.args.get("date")
        day = _parse_day(day_param, "date") if day_param else date.today()
        try:
            health = get_health_data_for_date(config, day)
        except KeyError as e:
            return jsonify({"error": e.args[0]}), 404
        conn = get_connection(config)
        try:
            calorie_target = settings_store.load_calorie_target(conn)
            macro_targets = settings_store.load_macro_targets(conn)
        finally:
            conn.close()
        return jsonify(today_summary(health, calorie_target, macro_targets))

    @app.route("/api/settings")
    def api_settings():
        conn = get_connection(config)
        result = settings_store.load_all(conn)
        conn.close()
        return jsonify(result)

    def _settings_updates(data):
        """Build every requested change before anything is written."""
        updates = []
        if "calorie_target" in data:
            updates.append((settings_store.save_calorie_target, int(data["calorie_target"])))
        if "macro_targets" in data:
            t = data["macro_targets"]
            updates.append((settings_store.save_macro_targets, MacroTargets(
                calories=int(t["calories"]), protein=int(t["protein"]),
                carbs=int(t["carbs"]), fats=int(t["fats"]),
            )))
        if "macro_split" in data:
            s = data["macro_split"]
            updates.append((settings_store.save_macro_split, MacroSplit(
                protein_pct=float(s["protein_pct"]), carbs_pct=float(s["carbs_pct"]),
                fats_pct=float(s["fats_pct"]),
            )))
        if "macro_mode" in data:
            mode = data["macro_mode"]
            if mode not in settings_store.MACRO_MODES:
                raise ValueError(f"macro_mode must be one of {', '.join(settings_store.MACRO_MODES)}")
            updates.append((settings_store.save_macro_mode, mode))
        return updates

    @app.route("/api/settings", methods=["POST"])
    def api_update_settings():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "JSON object body required"}), 400
        try:
            updates = _settings_updates(data)
        except (KeyError, TypeError, OverflowError) as e:
            return jsonify({"error": f"invalid settings payload: {e}"}), 400

        conn = get_connection(config)
        try:
            for save, value in updates:
                save(conn, value)
            result = settings_store.load_all(conn)
        finally:
            conn.close()
        return jsonify(result)

    return app

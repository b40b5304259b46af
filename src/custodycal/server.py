# src/custodycal/server.py
"""
HTTP surface: the subscribable iCal feed plus a JSON view of a single
day's evaluation for auditing which rule decided it.
"""
import logging
from datetime import date

from flask import Blueprint, Flask, Response, current_app, jsonify, request

from .config import DEFAULTS, load_config
from .engine import ROFR_OPTION, evaluate_custody
from .ical import generate_feed

logger = logging.getLogger(__name__)

feed = Blueprint('feed', __name__)

CACHE_SECONDS = 3600


@feed.route('/api/calendar.ics')
def calendar_feed():
    cfg = current_app.config['CUSTODYCAL']
    try:
        content = generate_feed(date.today(), config=cfg)
    except Exception:
        logger.exception("Error generating calendar feed")
        return jsonify({'error': 'Failed to generate calendar feed'}), 500

    resp = Response(content, mimetype='text/calendar')
    resp.headers['Content-Type'] = 'text/calendar; charset=utf-8'
    resp.headers['Content-Disposition'] = f'inline; filename="{cfg["feed_filename"]}"'
    resp.headers['Cache-Control'] = f'public, max-age={CACHE_SECONDS}'
    return resp


@feed.route('/api/custody/<day>')
def custody_for_day(day):
    """Debug view: parent, events, matchedLevel and matchedRule for one date."""
    options = {ROFR_OPTION: request.args.get('rofr') in ('1', 'true', 'yes')}
    try:
        d = date.fromisoformat(day)
        result = evaluate_custody(d, options)
    except ValueError:
        return jsonify({'error': f'Invalid date: {day}', 'expected': 'YYYY-MM-DD'}), 400
    return jsonify({'date': d.isoformat(), **result.to_dict()})


@feed.route('/health')
def health():
    return jsonify({'status': 'ok'})


def create_app(config=None):
    app = Flask(__name__)
    app.config['CUSTODYCAL'] = {**DEFAULTS, **config} if config is not None else load_config()
    app.register_blueprint(feed)
    return app


def main():
    cfg = load_config()
    logging.basicConfig(level=cfg.get('log_level', 'INFO'))
    app = create_app(cfg)
    logger.info(f"Serving custody feed on {cfg['host']}:{cfg['port']}")
    app.run(host=cfg['host'], port=int(cfg['port']))


if __name__ == '__main__':
    main()

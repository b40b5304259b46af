import json
import logging
import os


DEFAULTS = {
    'calendar_name': "Children's Custody Schedule",
    'calendar_description': 'Custody schedule - auto-updating feed',
    'custody_summary': 'Children with Mother',
    'timezone': 'America/Los_Angeles',
    'prodid': '-//CustodyCal//Custody Calendar//EN',
    'uid_domain': 'custodycal.local',
    'feed_filename': 'custody-schedule.ics',
    'feed_months': 12,
    'host': '127.0.0.1',
    'port': 8000,
    'log_level': 'INFO',
    'debug': False,
}


def _config_path():
    base = os.path.join(os.path.expanduser('~'), '.custodycal')
    os.makedirs(base, exist_ok=True)
    return os.path.join(base, 'custodycal_config.json')


def load_config():
    """Defaults, overlaid with whatever the user's config file sets."""
    cfg = dict(DEFAULTS)
    path = _config_path()
    if not os.path.exists(path):
        return cfg
    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (OSError, ValueError) as e:
        logging.error(f"Config could not be read ({path}): {e}")
        return cfg
    if isinstance(stored, dict):
        cfg.update(stored)
    else:
        logging.error(f"Config {path} is not a JSON object, using defaults")
    return cfg


def save_config(cfg: dict):
    path = _config_path()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)

"""Replace all calendar events with a small sample set.
Usage: python scripts/create_sample_events.py
"""
import sys
import pathlib
# Ensure `backend/` is on sys.path so the package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from learning_penguin.config import settings
from learning_penguin.database import Store
from learning_penguin.seed import reset_events


def main():
    """Open the configured store, reseed the events and print what was created."""
    store = Store(settings.DATABASE_URL).open()
    try:
        with store.session() as session:
            created = reset_events(session)
            print('Cleared existing events')
            for ev in created:
                print(f'Created event {ev.id}: {ev.title} ({ev.start.isoformat()})')
    except Exception as e:
        print(f'Error creating sample events: {e}')
        sys.exit(1)
    finally:
        store.close()


if __name__ == '__main__':
    main()

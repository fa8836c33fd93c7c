from __future__ import annotations

import os
import tempfile


# Must run before `config` is imported so the app never touches data/study_plan.db.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DATA_DIR"] = os.path.join(tempfile.gettempdir(), "study_plan_tests")

# update_checker.py
import time

import requests
from PyQt6.QtCore import QObject, pyqtSignal

VERSIONS_HOST = "https://raw.githubusercontent.com"
CHECK_INTERVAL_MS = 24 * 60 * 60 * 1000
REQUEST_TIMEOUT = 5


def compare_versions(v1, v2):
    """1 if v1 is newer than v2, -1 if older, 0 if equal. Missing or non-numeric parts count as 0."""
    def parts(version):
        result = []
        for part in version.split('.'):
            try: result.append(int(part))
            except ValueError: result.append(0)
        return result

    p1, p2 = parts(v1), parts(v2)
    for i in range(max(len(p1), len(p2))):
        n1 = p1[i] if i < len(p1) else 0
        n2 = p2[i] if i < len(p2) else 0
        if n1 > n2: return 1
        if n1 < n2: return -1
    return 0


class UpdateChecker(QObject):
    log_requested = pyqtSignal(str)

    def __init__(self, store, now=None):
        super().__init__()
        self.store = store
        self.now = now or (lambda: int(time.time() * 1000))

    def check(self, github_repo, script_name, current_version):
        """Returns (update_available, latest_version). Never raises."""
        cache_key = f"{script_name}_update_check"
        try:
            cached = self.store.get(cache_key) if self.store.has_key(cache_key) else None
        except Exception as e:
            self.log_requested.emit(f"Version check: could not read cache - {e}")
            cached = None

        if isinstance(cached, dict) and cached.get("latestVersion") and cached.get("lastCheck", 0) > self.now() - CHECK_INTERVAL_MS:
            return self._report(github_repo, script_name, current_version, cached["latestVersion"])

        try:
            response = requests.get(f"{VERSIONS_HOST}/{github_repo}/main/versions.json", timeout=REQUEST_TIMEOUT)
            if response.status_code != 200:
                self.log_requested.emit(f"Version check: Unable to fetch versions.json (HTTP {response.status_code})")
                return False, None
            latest = response.json().get(script_name)
            if not latest:
                self.log_requested.emit(f"Version check: Script name '{script_name}' not found in versions.json")
                return False, None
            latest = latest[1:] if latest.startswith('v') else latest
            self.store.set(cache_key, {"lastCheck": self.now(), "latestVersion": latest})
        except (requests.RequestException, ValueError, AttributeError) as e:
            self.log_requested.emit(f"Version check: Error - {e}")
            return False, None
        return self._report(github_repo, script_name, current_version, latest)

    def _report(self, github_repo, script_name, current_version, latest):
        if compare_versions(latest, current_version) > 0:
            self.log_requested.emit(f"{script_name} {latest} update available (you have {current_version}). Download at github.com/{github_repo}")
            return True, latest
        return False, latest

"""Thread-safe record of what each worker deleted or failed to delete."""
import threading
from typing import Dict, List


class CleanupReport:
    def __init__(self):
        self._lock = threading.Lock()
        self._results: Dict[str, Dict[str, List[str]]] = {}

    def record(self, resource_type: str, resource_id: str, success: bool, message: str = '') -> None:
        with self._lock:
            entry = self._results.setdefault(resource_type, {'deleted': [], 'failed': []})
            if success:
                entry['deleted'].append(resource_id)
            else:
                msg = f"{resource_id} ({message})" if message else resource_id
                entry['failed'].append(msg)

    def snapshot(self) -> Dict[str, Dict[str, List[str]]]:
        """Copy of the results collected so far."""
        with self._lock:
            return {k: {'deleted': list(v['deleted']), 'failed': list(v['failed'])}
                    for k, v in self._results.items()}

    def format(self) -> str:
        lines = ['', '=== Default VPC Cleanup Report ===']
        results = self.snapshot()
        if not results:
            lines.append('Nothing was deleted.')
        for resource_type, entry in results.items():
            lines.append(f"\nResource: {resource_type}")
            for label, key in (('Deleted', 'deleted'), ('Failed', 'failed')):
                lines.append(f"  {label}:")
                if entry[key]:
                    lines.extend(f"    - {item}" for item in entry[key])
                else:
                    lines.append('    None')
        return '\n'.join(lines)

    def print_report(self) -> None:
        print(self.format())

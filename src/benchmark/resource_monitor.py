import statistics
import threading

import psutil


class ResourceMonitor:

    def __init__(self, interval: float = 0.5):
        self.interval = interval
        self.monitor_thread = None
        self.cpu_samples = []
        self.memory_samples = []
        self._stop = threading.Event()

    def start_monitoring(self):
        self._stop.clear()
        self.cpu_samples = []
        self.memory_samples = []

        # warm-up psutil
        psutil.cpu_percent(interval=None, percpu=True)

        def monitor():
            while not self._stop.wait(self.interval):
                self._sample()

        self.monitor_thread = threading.Thread(target=monitor, name="resource-monitor", daemon=True)
        self.monitor_thread.start()

    def stop_monitoring(self):
        self._stop.set()
        if self.monitor_thread is not None:
            self.monitor_thread.join(timeout=self.interval * 2)

        # short runs finish before the first tick
        if not self.cpu_samples:
            self._sample()

        return {
            'system_cores_avg': statistics.mean(self.cpu_samples),
            'memory_peak': max(self.memory_samples),
        }

    def _sample(self):
        # system CPU as "core equivalents"
        per_cpu = psutil.cpu_percent(interval=None, percpu=True)
        self.cpu_samples.append(sum(per_cpu) / 100.0)
        self.memory_samples.append(psutil.virtual_memory().used / 1024 / 1024)  # MB

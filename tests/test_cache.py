import threading
import time
import unittest
from datetime import timedelta

from src.data_sources.cache import ReadWriteLock, SnapshotCache, cache_key


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestSnapshotCache(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.cache = SnapshotCache(clock=self.clock)

    def test_miss_on_empty_cache(self):
        value, found = self.cache.get("42.03,-93.63", timedelta(minutes=30))
        self.assertIsNone(value)
        self.assertFalse(found)

    def test_fresh_value_is_returned(self):
        self.cache.set("k", "snapshot")
        self.clock.now += 60
        value, found = self.cache.get("k", timedelta(minutes=2))
        self.assertTrue(found)
        self.assertEqual(value, "snapshot")

    def test_stale_value_is_a_miss(self):
        self.cache.set("k", "snapshot")
        self.clock.now += 180
        value, found = self.cache.get("k", timedelta(minutes=2))
        self.assertFalse(found)
        self.assertIsNone(value)

    def test_set_overwrites_and_restamps(self):
        self.cache.set("k", "old")
        self.clock.now += 100
        self.cache.set("k", "new")
        self.clock.now += 50
        value, found = self.cache.get("k", timedelta(seconds=60))
        self.assertTrue(found)
        self.assertEqual(value, "new")
        self.assertEqual(len(self.cache), 1)

    def test_cache_key_rounds_coordinates(self):
        self.assertEqual(cache_key(42.0308, -93.6319), "42.03,-93.63")
        self.assertEqual(cache_key(42.0308, -93.6319, precision=1), "42.0,-93.6")

    def test_concurrent_writers_and_readers(self):
        errors = []

        def writer(n):
            for i in range(200):
                self.cache.set(f"w{n}", i)

        def reader():
            for _ in range(200):
                try:
                    self.cache.get("w0", timedelta(minutes=1))
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(self.cache), 4)
        self.assertEqual(self.cache.get("w3", timedelta(minutes=1)), (199, True))


class TestReadWriteLock(unittest.TestCase):

    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(2, timeout=2)

        def read():
            with lock.read():
                inside.wait()

        threads = [threading.Thread(target=read) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=3)
        self.assertFalse(inside.broken)

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        events = []
        writing = threading.Event()

        def write():
            with lock.write():
                writing.set()
                events.append("write-start")
                time.sleep(0.05)
                events.append("write-end")

        def read():
            writing.wait()
            with lock.read():
                events.append("read")

        w = threading.Thread(target=write)
        r = threading.Thread(target=read)
        w.start()
        r.start()
        w.join()
        r.join()
        self.assertEqual(events, ["write-start", "write-end", "read"])


if __name__ == '__main__':
    unittest.main()

import os
import random
import string
import time

import numpy as np
import pandas as pd
import psutil

from py_multisearch import MultiPropertySearchCollection, SearchablePropertyEnum, extractor


# Native Python object
class Record:
    def __init__(self, id, age, score, active, country, group, tags):
        self.id = id
        self.age = age
        self.score = score
        self.active = active
        self.country = country
        self.group = group
        self.tags = tags

    def __repr__(self):
        return (
            f"Record(id={self.id}, age={self.age}, score={self.score:.1f}, "
            f"active={self.active}, country='{self.country}', group='{self.group}', tags='{self.tags}')"
        )

    def to_dict(self):
        return {
            "id": self.id,
            "age": self.age,
            "score": self.score,
            "active": self.active,
            "country": self.country,
            "group": self.group,
            "tags": self.tags,
        }


class RecordProperty(SearchablePropertyEnum):
    AGE = extractor(lambda r: r.age)
    ACTIVE = extractor(lambda r: r.active)
    COUNTRY = extractor(lambda r: r.country)
    GROUP = extractor(lambda r: r.group)
    TAGS = extractor(lambda r: r.tags)


def random_str(length=5):
    return ''.join(random.choices(string.ascii_lowercase, k=length))


# Memory usage helper
def mem_usage_mb():
    return psutil.Process(os.getpid()).memory_info().rss / 1024 / 1024


N = 100_000
ITERATIONS = 1_000
random.seed(42)
np.random.seed(42)

print("creating Objects")
data = [
    Record(
        id=i,
        age=int(np.random.randint(18, 80)),
        score=float(np.random.rand() * 100),
        active=bool(np.random.choice([True, False])),
        country=str(np.random.choice(["US", "CA", "MX", "FR", "DE"])),
        group=random_str(),
        tags=str(np.random.choice(["a", "b", "c", "d"])),
    )
    for i in range(N)
]

df = pd.DataFrame([r.to_dict() for r in data])
print("objects created")

print("Starting Pandas")
start = time.perf_counter()
for i in range(ITERATIONS):
    filtered_df = df[(df["country"] == "CA") & (df["age"] == 42)]
duration_df = time.perf_counter() - start
mem_df = mem_usage_mb()

print("Starting building collection")
start = time.perf_counter()
collection = MultiPropertySearchCollection(RecordProperty, data)
duration_build = time.perf_counter() - start
mem_build = mem_usage_mb()

print("Starting collection")
start = time.perf_counter()
for i in range(ITERATIONS):
    by_age = collection.search_by_property(RecordProperty.AGE, 42)
    filtered = [r for r in by_age if r.country == "CA"]
duration_ix = time.perf_counter() - start
mem_ix = mem_usage_mb()

print("Starting list comprehension")
start = time.perf_counter()
for i in range(ITERATIONS // 100):
    filtered_py = [r for r in data if r.country == "CA" and r.age == 42]
duration_py = (time.perf_counter() - start) * 100

# Print Results
print("\n==== Benchmark Results ====")
print(f"Python List Comp:   {duration_py:.6f} s | Result size: {len(filtered_py)}")
print(f"Pandas Filter:      {duration_df:.6f} s | Mem: {mem_df:.1f} MB | Result size: {len(filtered_df)}")
print(f"Collection Build:   {duration_build:.4f} s | Mem: {mem_build:.1f} MB")
print(f"Collection Filter:  {duration_ix:.6f} s | Mem: {mem_ix:.1f} MB | Result size: {len(filtered)}")

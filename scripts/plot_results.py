import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path

# ============================================================
# Paths
# ============================================================
PROJECT_ROOT = Path(__file__).resolve().parents[1]
RESULTS_CSV = PROJECT_ROOT / "results.csv"
SIZE_ORDER = ["small", "medium", "large"]

print(f"Loading results from: {RESULTS_CSV}")

# ============================================================
# Load CSV
# ============================================================
df = pd.read_csv(RESULTS_CSV)
df.columns = df.columns.str.strip()
df["compact"] = df["compact"].astype(str).str.lower() == "true"
sizes = [s for s in SIZE_ORDER if s in set(df["instance"])]

# ============================================================
# PLOT 1: Placement rate across seeds
# ============================================================
plt.figure(figsize=(7, 4))
for inst in sizes:
    subset = df[(df["instance"] == inst) & df["compact"]]
    plt.scatter(subset["seed"], subset["placement_rate"], label=inst, alpha=0.7)

plt.xlabel("Random seed")
plt.ylabel("Placed units / required units")
plt.title("Placement rate across seeds (compaction on)")
plt.legend()
plt.grid(True)
plt.tight_layout()

# ============================================================
# PLOT 2: Runtime by instance size
# ============================================================
plt.figure(figsize=(6, 4))
runtime = (
    df.groupby("instance")["wall_time_s"]
      .agg(["mean", "std"])
      .reindex(sizes)
)

plt.bar(runtime.index, runtime["mean"], yerr=runtime["std"], capsize=6)
plt.ylabel("Mean wall time (s)")
plt.title("Runtime by instance size")
plt.grid(axis="y")
plt.tight_layout()

# ============================================================
# PLOT 3: Unscheduled units with and without compaction
# ============================================================
plt.figure(figsize=(7, 4))
unscheduled = (
    df.groupby(["instance", "compact"])["unscheduled"]
      .mean()
      .unstack("compact")
      .reindex(sizes)
)

width = 0.4
positions = range(len(unscheduled.index))
plt.bar([p - width / 2 for p in positions], unscheduled.get(True, 0), width, label="compaction on")
plt.bar([p + width / 2 for p in positions], unscheduled.get(False, 0), width, label="compaction off")
plt.xticks(list(positions), unscheduled.index)
plt.ylabel("Mean unscheduled units")
plt.title("Unscheduled units by instance size")
plt.legend()
plt.grid(axis="y")
plt.tight_layout()

# ============================================================
# SHOW ALL FIGURES AT ONCE
# ============================================================
plt.show()

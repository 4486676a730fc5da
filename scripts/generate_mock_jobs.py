import pandas as pd
import numpy as np
from datetime import datetime, timezone, timedelta

DRIVERS = ["Tendai Moyo", "Rudo Chikwanha", "Farai Ncube", "Nyasha Dube", "Kuda Sibanda"]
CUSTOMERS = ["Harare Hardware", "Mbare Produce", "Avondale Pharmacy", "Borrowdale Books", "Eastlea Motors"]
ADDRESSES = [
    "Samora Machel Ave, Harare",
    "Julius Nyerere Way, Harare",
    "Borrowdale Rd, Harare",
    "Seke Rd, Chitungwiza",
    "Enterprise Rd, Harare",
    "Mutare Rd, Msasa",
]


def generate_mock_jobs(num_jobs=50, output_file="jobs_upload.csv", invalid_ratio=0.0, seed=None):
    """
    Generates a CSV in the format the dispatch office exports, ready for
    POST /api/jobs/upload/. Column headers use the office's names
    ("Reference Number", "Customer", ...) so the upload's header mapping is
    exercised.

    invalid_ratio blanks the driver on that share of rows, which the
    upload will skip.
    """
    rng = np.random.default_rng(seed)
    now = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)

    data = []
    for job_index in range(num_jobs):
        collection, delivery = rng.choice(ADDRESSES, size=2, replace=False)
        driver = rng.choice(DRIVERS)
        if rng.random() < invalid_ratio:
            driver = ""

        data.append({
            "Reference Number": f"JOB-{str(job_index + 1).zfill(5)}",
            "Customer": rng.choice(CUSTOMERS),
            "Driver": driver,
            "Collection Address": collection,
            "Delivery Address": delivery,
            "Collection Time": (now + timedelta(minutes=30 * int(rng.integers(0, 48)))).isoformat(),
            "Notes": "",
        })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {num_jobs} jobs and saved to '{output_file}'")
    return df


if __name__ == "__main__":
    generate_mock_jobs(num_jobs=100)

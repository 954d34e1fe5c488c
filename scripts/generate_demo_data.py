#!/usr/bin/env python3
"""
Demo Data CSV Script

Writes a demo dataset as two CSV files in the dashboard's upload format, so
the data can be loaded through POST /api/v1/upload/customers and
POST /api/v1/upload/sales (customers first).

Usage:
    python generate_demo_data.py --output-dir ./demo
    python generate_demo_data.py --output-dir ./demo --seed 42
"""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.demo_data_service import DemoDataset, generate_demo_data

CUSTOMER_COLUMNS = ["name", "email", "phone", "company", "city", "status"]
SALE_COLUMNS = ["customerName", "product", "quantity", "unitPrice", "status"]


def write_customers_csv(dataset: DemoDataset, output_path: Path) -> int:
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CUSTOMER_COLUMNS)
        writer.writeheader()
        for customer in dataset.customers:
            writer.writerow({
                "name": customer.name,
                "email": customer.email,
                "phone": customer.phone or "",
                "company": customer.company or "",
                "city": customer.city or "",
                "status": customer.status.value,
            })
    return len(dataset.customers)


def write_sales_csv(dataset: DemoDataset, output_path: Path) -> int:
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=SALE_COLUMNS)
        writer.writeheader()
        for sale in dataset.sales:
            writer.writerow({
                "customerName": sale.customer_name,
                "product": sale.product,
                "quantity": sale.quantity,
                "unitPrice": str(sale.unit_price),
                "status": sale.status.value,
            })
    return len(dataset.sales)


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Write demo customers and sales as uploadable CSV files",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        default=".",
        help="Directory for customers.csv and sales.csv (default: current directory)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible output"
    )

    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"Generating demo data (seed: {args.seed if args.seed is not None else 'random'})")
    dataset = generate_demo_data(seed=args.seed)

    customers_path = output_dir / "customers.csv"
    sales_path = output_dir / "sales.csv"

    customer_count = write_customers_csv(dataset, customers_path)
    sale_count = write_sales_csv(dataset, sales_path)

    print(f"✓ Wrote {customer_count} customers to {customers_path}")
    print(f"✓ Wrote {sale_count} sales to {sales_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

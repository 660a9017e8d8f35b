import sys

from upload_analyzer.execution.config_executor import ConfigExecutor


def main():
    if len(sys.argv) != 2:
        print("Usage: upload-analyzer-run <config.yaml>")
        sys.exit(1)

    config_path = sys.argv[1]
    executor = ConfigExecutor(config_path)
    result = executor.execute()

    print("\n=== Execution Completed ===")
    print(f"File: {result.get('file_name')}")
    print(f"Rows: {result.get('total_rows')}  Columns: {result.get('total_columns')}")
    print(f"Status: {result.get('status')}")
    if result.get("dataset_id"):
        print(f"Dataset: {result.get('dataset_id')}")


if __name__ == "__main__":
    main()

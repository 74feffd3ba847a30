from __future__ import annotations

import argparse
from pathlib import Path

from stack_synth import App, Bucket, PhysicalName, Queue, Stack, Topic


def build() -> App:
    app = App()
    producer = Stack(app, "Producer", account="111111111111", region="us-east-1")
    notifications = Stack(app, "Notifications", account="111111111111", region="us-east-1")
    analytics = Stack(app, "Analytics", account="222222222222", region="eu-west-1")

    data = Bucket(producer, "Data", physical_name=PhysicalName.GENERATE_IF_NEEDED)
    ingest = Queue(producer, "Ingest", visibility_timeout=120)
    Topic(
        notifications,
        "Events",
        subscriptions=[{"protocol": "sqs", "endpoint": ingest.queue_arn}],
    )
    Queue(
        analytics,
        "Reports",
        tags={"source-bucket": data.bucket_name, "source-objects": data.arn_for_objects("*")},
    )
    return app


def main() -> None:
    parser = argparse.ArgumentParser(description="Synthesize stacks via the Python API")
    parser.add_argument("--out", default="synth.out", help="Output directory")
    parser.add_argument("--stack", help="Print one stack's template instead of saving")
    args = parser.parse_args()

    assembly = build().synth()
    if args.stack:
        print(assembly.get_stack(args.stack).template)
        return

    for path in assembly.save(Path(args.out)):
        print(f"wrote {path}")
    print("Deployment order:", ", ".join(assembly.stack_names))


if __name__ == "__main__":
    main()

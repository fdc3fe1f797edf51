#!/usr/bin/env python3
"""
Pull request file labeler
Adds labels to open PRs whose changed files match the globs configured in
.github/pr-labeler.yml (label -> glob or list of globs).
"""

import os
import sys
import logging
import traceback
from dataclasses import dataclass
from typing import Optional

from budget import OperationBudget
from decision import decide, needs_labels
from github_client import PullRequestSummary, RepoClient
from inputs import Args, load_args, load_context
from rules import RuleMapping, load_local, parse

VERBOSE = os.getenv("VERBOSE", "").lower() in {"1", "true", "yes", "on"}
MODE = os.getenv("MODE", "live").lower()
LOCAL_CONFIG_PATH = os.getenv("LOCAL_CONFIG_PATH")

logging.basicConfig(level=logging.DEBUG if VERBOSE else logging.INFO, format="%(asctime)s %(levelname)s: %(message)s")
logger = logging.getLogger("pr-file-labeler")

LOG_PREFIX = ""

def _log(message: str) -> None:
    print(f"{LOG_PREFIX}{message}")

def _elog(message: str) -> None:
    print(f"{LOG_PREFIX}{message}", file=sys.stderr)

def _vlog(message: str) -> None:
    if VERBOSE:
        _log(message)

def _warning(message: str) -> None:
    # workflow command: shows up as an annotation on the run
    print(f"::warning::{message}")

def _error(message: str) -> None:
    print(f"::error::{message}")


@dataclass
class RunSummary:
    pages: int = 0
    seen: int = 0
    skipped: int = 0
    labeled: int = 0
    budget_exhausted: bool = False


def _stop_for_budget(args: Args, summary: RunSummary) -> RunSummary:
    summary.budget_exhausted = True
    logger.warning("operation budget of %d spent, stopping run", args.operations_per_run)
    _warning(f"performed {args.operations_per_run} operations, exiting to avoid rate limit")
    return summary

def load_rules(client, args: Args, budget: OperationBudget, local_config_path: Optional[str] = None) -> RuleMapping:
    if local_config_path:
        rules = load_local(local_config_path)
        _vlog(f"[CONFIG] Loaded local config from {local_config_path}")
        return rules
    raw = client.get_file_contents(args.configuration_path)
    budget.charge()
    rules = parse(raw)
    _vlog(f"[CONFIG] Loaded {args.configuration_path} from {client.context.full_name}")
    return rules

def process_pr(client, pr: PullRequestSummary, rules: RuleMapping, args: Args, budget: OperationBudget,
               summary: RunSummary, dry_run: bool = False) -> None:
    global LOG_PREFIX
    _log(f"found pr #{pr.number}: {pr.title}")
    previous_prefix = LOG_PREFIX
    LOG_PREFIX = "\t"
    try:
        summary.seen += 1
        if args.skip_labeled_prs and pr.labels:
            _vlog(f"[SKIP] PR #{pr.number} already has labels: {sorted(pr.labels)}")
            summary.skipped += 1
            return
        _vlog(f"fetching changed files for pr #{pr.number}")
        changed_files = client.list_changed_files(pr)
        budget.charge()
        if budget.exhausted():
            # a label write now would go over the limit
            return
        _vlog("found changed files:")
        for changed_file in changed_files:
            _vlog("  " + changed_file)
        labels = decide(changed_files, rules)
        if not needs_labels(labels, pr.labels):
            _vlog(f"[SKIP] PR #{pr.number} needs no new labels (matched: {sorted(labels)})")
            return
        if dry_run:
            _log(f"[DRY-RUN] Would add labels to PR #{pr.number}: {sorted(labels)}")
            return
        client.add_labels(pr, labels)
        budget.charge()
        summary.labeled += 1
        _log(f"Added labels to PR #{pr.number}: {sorted(labels)}")
    finally:
        LOG_PREFIX = previous_prefix

def process_prs(client, rules: RuleMapping, args: Args, budget: OperationBudget, dry_run: bool = False) -> RunSummary:
    summary = RunSummary()
    page = 1
    while True:
        if budget.exhausted():
            return _stop_for_budget(args, summary)
        prs = client.list_open_pull_requests(page)
        budget.charge()
        summary.pages += 1
        if not prs:
            return summary
        if budget.exhausted():
            return _stop_for_budget(args, summary)
        for pr in prs:
            process_pr(client, pr, rules, args, budget, summary, dry_run=dry_run)
            if budget.exhausted():
                return _stop_for_budget(args, summary)
        page += 1

def run(client, args: Args, budget: Optional[OperationBudget] = None, local_config_path: Optional[str] = None,
        dry_run: bool = False) -> RunSummary:
    budget = budget if budget is not None else OperationBudget(args.operations_per_run)
    if budget.exhausted() and not local_config_path:
        return _stop_for_budget(args, RunSummary())
    rules = load_rules(client, args, budget, local_config_path)
    if not rules:
        _log("No label rules configured; nothing to do")
        return RunSummary()
    _log(f"Loaded {len(rules)} label rules: {', '.join(rules)}")
    return process_prs(client, rules, args, budget, dry_run=dry_run)

def main() -> int:
    try:
        args = load_args()
        context = load_context()
        client = RepoClient.from_token(args.repo_token, context)
        print(f"Labeling open PRs in {context.full_name} (mode={MODE}, operations-per-run={args.operations_per_run})")
        summary = run(client, args, local_config_path=LOCAL_CONFIG_PATH, dry_run=MODE == "dry-run")
    except Exception as e:
        _elog(str(e))
        _elog(traceback.format_exc())
        _error(str(e))
        return 1
    logger.info("Done: %d pages, %d PRs seen, %d skipped, %d labeled",
                summary.pages, summary.seen, summary.skipped, summary.labeled)
    return 0

if __name__ == "__main__":
    sys.exit(main())

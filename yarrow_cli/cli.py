"""CLI main entry point"""

import logging
from typing import Optional

import click
import typer

from .core.fusion import HierarchicalFusionEngine
from .core.loader import TierOutputLoader, load_config

app = typer.Typer(help="Yarrow CLI - Fuse tiered detector outputs")


def _echo_kv_aligned(pairs: list[tuple[str, str]]) -> None:
    """Print multiple key-values with aligned colon positions."""
    if not pairs:
        return
    width = max(len(k) for k, _ in pairs)
    for k, v in pairs:
        click.secho(k.ljust(width), bold=True, fg="bright_white", nl=False)
        click.secho(": ", fg="bright_black", nl=False)
        click.secho(f"{v}", fg="bright_cyan")


def _echo_list(label: str, items: list) -> None:
    if not items:
        return
    click.secho(label, bold=True, fg="bright_white", nl=False)
    click.secho(":", fg="bright_black")
    for item in items:
        click.secho(f"  - {item}", fg="bright_cyan")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config_or_exit(config_path: Optional[str]):
    try:
        return load_config(config_path)
    except (TypeError, ValueError) as e:
        click.secho(f"Invalid configuration: {e}", fg="red")
        raise typer.Exit(code=2)


@app.command()
def fuse(
    run_dir: str = typer.Argument(..., help="Directory holding tier1.yaml, tier2.yaml and tier3.yaml"),
    config_path: Optional[str] = typer.Option(None, "--config", help="YAML file with fusion weights and thresholds"),
    skip_business: bool = typer.Option(False, "--skip-business", help="Ignore tier-3 output and fuse two tiers"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (defaults to the config's)"),
):
    """Fuse the tier outputs of one analysis run"""
    config = _load_config_or_exit(config_path)
    _configure_logging(log_level or config.log_level)

    loader = TierOutputLoader(run_dir)
    traditional, segments, grounding = loader.load_all(include_business=not skip_business)

    result = HierarchicalFusionEngine(config).fuse(traditional, segments, grounding)
    consolidated = result.consolidated_results
    readiness = consolidated.implementation_readiness
    summary = consolidated.confidence_summary

    _echo_kv_aligned([
        ("primary_framework", f"{consolidated.primary_framework or 'N/A'}"),
        ("primary_business_domain", f"{consolidated.primary_business_domain or 'N/A'}"),
        ("overall_confidence", f"{summary.overall_confidence:.3f}"),
        ("implementation_readiness", f"{readiness.overall_readiness:.3f}"),
        ("tiers_processed", f"{result.fusion_metadata.tiers_processed}"),
    ])
    _echo_list("secondary_frameworks", consolidated.secondary_frameworks)
    _echo_list("secondary_business_domains", consolidated.secondary_business_domains)
    _echo_list("architectural_patterns", consolidated.architecture_assessment.architectural_patterns)
    _echo_list("next_steps", readiness.recommended_next_steps)
    if consolidated.business_value_assessment is not None:
        _echo_list("high_value_capabilities",
                   consolidated.business_value_assessment.high_value_capabilities)

    qa = consolidated.quality_assurance
    metrics = result.quality_metrics
    _echo_kv_aligned([
        ("framework_confidence_proxy", f"{qa.framework_confidence_proxy:.3f}"),
        ("domain_confidence_proxy", f"{qa.domain_confidence_proxy:.3f}"),
        ("cross_tier_consistency", f"{qa.cross_tier_consistency:.3f}"),
        ("overall_fusion_quality", f"{metrics.overall_fusion_quality:.3f}"),
        ("result_completeness", f"{metrics.result_completeness:.3f}"),
        ("improvement_over_baseline", f"{metrics.improvement_over_baseline:.3f}"),
    ])

    issues = result.validated_results.validation_issues
    if issues:
        click.secho("issues", bold=True, fg="bright_white", nl=False)
        click.secho(":", fg="bright_black")
        for issue in issues:
            click.secho(f"  - {issue}", fg="yellow")

    if consolidated.primary_framework is None and consolidated.primary_business_domain is None:
        click.secho("No confident conclusion.", fg="yellow")


@app.command()
def thresholds(
    config_path: Optional[str] = typer.Option(None, "--config", help="YAML file with fusion weights and thresholds"),
):
    """Display the effective weights and thresholds"""
    config = _load_config_or_exit(config_path)
    fw = config.fusion_weights
    aw = config.agreement_weights
    tw = config.tier_confidence_weights
    th = config.thresholds
    _echo_kv_aligned([
        ("fusion_weights", f"{fw.tier1_traditional}, {fw.tier2_context_aware}, {fw.tier3_business_grounding}"),
        ("agreement_weights", f"{aw.tier1_traditional}, {aw.tier2_context_aware}, {aw.tier3_business_grounding}"),
        ("tier_confidence_weights", f"{tw.tier1_traditional}, {tw.tier2_context_aware}, {tw.tier3_business_grounding}"),
        ("min_framework_confidence", f"{th.min_framework_confidence}"),
        ("min_domain_confidence", f"{th.min_domain_confidence}"),
        ("min_tier_agreement", f"{th.min_tier_agreement}"),
    ])


def main():
    """Main entry function"""
    app()


if __name__ == "__main__":
    main()

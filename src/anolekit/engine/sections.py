"""The lesson sections, in reading order.

Each section is a small class with a ``name``, a ``title`` and a
``run(context)`` method that writes what a reader should see with
``context.say``. :func:`build_sections` selects and orders them.
"""

from __future__ import annotations

import logging

import numpy as np

from anolekit import introspection, scoping
from anolekit.engine.config import LessonConfig
from anolekit.engine.lesson import LessonContext, Section, format_values
from anolekit.stats import (
    arithmetic_mean,
    diversity_by_group,
    diversity_by_group_inline,
    mean,
    normalize,
    normalize_general,
    normalize_keyword_only,
    normalize_with_default,
    std,
)
from anolekit.tidy import UnknownColumnError, above_mean, add_one_to_col
from anolekit.visualization import plot_site, plot_sites_faceted, variable_plot

__all__ = ["SECTION_CLASSES", "build_sections", "section_names"]

logger = logging.getLogger(__name__)

ONE_TO_FIVE = np.arange(1, 6, dtype=float)
MISSING_VECTOR = np.array([1, 2, 3, 4, 5, np.nan])


class FunctionIntroSection:
    name = "intro"
    title = "Function intro"

    def run(self, context: LessonContext) -> LessonContext:
        lizards = context.get_lizards()
        context.say("mean(1..5) =", format_values(mean(ONE_TO_FIVE)))
        context.say("mean(SVL) =", format_values(mean(lizards["SVL"])))
        context.say(
            "arithmetic_mean(1..5) =", format_values(arithmetic_mean(ONE_TO_FIVE))
        )
        context.say(
            "arithmetic_mean(SVL) =", format_values(arithmetic_mean(lizards["SVL"]))
        )
        by_site = lizards.groupby("Site")["SVL"].agg(arithmetic_mean)
        context.say("mean SVL by site, aggregated with arithmetic_mean:")
        for site, value in by_site.items():
            context.say(f"  {site}: {format_values(value)}")
        return context


class DotsSection:
    name = "dots"
    title = "Forwarding extra keyword arguments"

    def run(self, context: LessonContext) -> LessonContext:
        context.say("normalize(1..5) =", format_values(normalize(ONE_TO_FIVE)))
        context.say("values with a missing entry:", format_values(MISSING_VECTOR))
        context.say("mean(values) =", format_values(mean(MISSING_VECTOR)))
        context.say(
            "mean(values, na_rm=True) =",
            format_values(mean(MISSING_VECTOR, na_rm=True)),
        )
        context.say("normalize(values) =", format_values(normalize(MISSING_VECTOR)))
        context.say(
            "normalize(values, na_rm=True) =",
            format_values(normalize(MISSING_VECTOR, na_rm=True)),
        )
        context.say("na_rm was not a parameter of normalize; **kwargs carried it.")
        return context


class DefaultsSection:
    name = "defaults"
    title = "Default and keyword-only arguments"

    def run(self, context: LessonContext) -> LessonContext:
        context.say(
            "normalize_with_default(values) =",
            format_values(normalize_with_default(MISSING_VECTOR)),
        )
        context.say(
            "normalize_with_default(values, False) =",
            format_values(normalize_with_default(MISSING_VECTOR, False)),
        )
        context.say(
            "normalize_with_default(x=values, na_rm=False) =",
            format_values(normalize_with_default(x=MISSING_VECTOR, na_rm=False)),
        )
        context.say(
            "normalize_keyword_only(values, na_rm=False) =",
            format_values(normalize_keyword_only(MISSING_VECTOR, na_rm=False)),
        )
        try:
            normalize_keyword_only(MISSING_VECTOR, False)  # type: ignore[misc]
        except TypeError as exc:
            context.say("normalize_keyword_only(values, False) raises TypeError:", exc)
        return context


class GeneralSection:
    name = "general"
    title = "Choosing among options"

    def run(self, context: LessonContext) -> LessonContext:
        default = normalize_general(MISSING_VECTOR)
        context.say("normalize_general(values) =", format_values(default))
        same = np.allclose(
            default, normalize_keyword_only(MISSING_VECTOR), equal_nan=True
        )
        context.say("same as normalize_keyword_only(values):", same)
        for method in ("mean", "m", "center"):
            context.say(
                f"normalize_general(values, method={method!r}) =",
                format_values(normalize_general(MISSING_VECTOR, method=method)),
            )
        try:
            normalize_general(MISSING_VECTOR, method="zscore")
        except ValueError as exc:
            context.say("method='zscore' raises ValueError:", exc)
        return context


class DiversitySection:
    name = "diversity"
    title = "Shannon diversity by site"

    def run(self, context: LessonContext) -> LessonContext:
        lizards = context.get_lizards()
        inline = diversity_by_group_inline(lizards, "Site", "Color_morph")
        context.say("inline count -> proportion -> aggregate:")
        for line in inline.to_string(index=False).splitlines():
            context.say("  " + line)

        named = diversity_by_group(
            lizards,
            "Site",
            color_diversity="Color_morph",
            perch_diversity="Perch_type",
        )
        context.say("with shannon_diversity():")
        for line in named.to_string(index=False, float_format="{:.3f}".format).splitlines():
            context.say("  " + line)
        return context


class ScopingSection:
    name = "scoping"
    title = "Local variables and scoping"

    def run(self, context: LessonContext) -> LessonContext:
        context.say("important_variable =", scoping.important_variable)
        context.say("scope_function1(1) =", scoping.scope_function1(1))
        context.say("scope_function2(1) =", scoping.scope_function2(1))
        context.say("scope_function3(1) =", scoping.scope_function3(1))
        context.say(
            "important_function(1..10) =",
            format_values(scoping.important_function(np.arange(1, 11))),
        )
        triple = scoping.make_scaler(3)
        context.say("make_scaler(3)(2) =", triple(2))
        chain = scoping.lookup_chain(scoping.scope_function3)
        context.say("scope_function3 locals:", ", ".join(chain.local))
        context.say("scope_function3 module names:", ", ".join(sorted(chain.module)))
        return context


class SitePlotSection:
    name = "plots"
    title = "Plotting one site at a time"

    def run(self, context: LessonContext) -> LessonContext:
        lizards = context.get_lizards()
        plot = context.config.plot
        point_kws = {"s": plot.point_size, "alpha": plot.alpha}

        fig = plot_sites_faceted(
            lizards, plot.x, plot.y, point_kws=point_kws, confidence=plot.confidence
        )
        context.show_figure(fig, f"all_sites_{plot.x}_{plot.y}")

        fig = plot_site(
            lizards,
            plot.site,
            plot.x,
            plot.y,
            point_kws=point_kws,
            confidence=plot.confidence,
        )
        context.show_figure(fig, f"site_{plot.site}_{plot.x}_{plot.y}")
        return context


class TidySection:
    name = "tidy"
    title = "Passing column names into functions"

    def run(self, context: LessonContext) -> LessonContext:
        lizards = context.get_lizards()
        site = context.config.plot.site

        fig = variable_plot(lizards, site, "SVL", "Tail", alpha=context.config.plot.alpha)
        context.show_figure(fig, f"site_{site}_SVL_Tail")

        try:
            variable_plot(lizards, site, "snout_length", "Tail")
        except UnknownColumnError as exc:
            context.say("variable_plot(x='snout_length') raises UnknownColumnError:", exc)

        big = above_mean(lizards, "SVL")
        context.say(
            f"above_mean(SVL): {len(big)} of {len(lizards)} lizards "
            f"(mean SVL {format_values(mean(lizards['SVL'], na_rm=True))})"
        )
        ratio = above_mean(lizards, lambda d: d["Tail"] / d["SVL"])
        context.say(f"above_mean(Tail / SVL): {len(ratio)} lizards")

        plus_one = add_one_to_col(lizards, "SVL", var_name="SVL_plus_one")
        context.say("add_one_to_col(SVL, var_name='SVL_plus_one'):")
        for line in plus_one[["SVL", "SVL_plus_one"]].head(3).to_string().splitlines():
            context.say("  " + line)
        return context


class IntrospectionSection:
    name = "introspection"
    title = "Looking inside a function"

    def run(self, context: LessonContext) -> LessonContext:
        context.say("args:", introspection.args(normalize_general))
        for name, default in introspection.formals(normalize_general).items():
            context.say(f"  {name} = {default!r}")
        description = introspection.describe_function(std)
        n_lines = len(description.source.splitlines()) if description.source else 0
        context.say(f"{description.name}: {description.doc} ({n_lines} source lines)")
        return context


SECTION_CLASSES: tuple[type, ...] = (
    FunctionIntroSection,
    DotsSection,
    DefaultsSection,
    GeneralSection,
    DiversitySection,
    ScopingSection,
    SitePlotSection,
    TidySection,
    IntrospectionSection,
)


def section_names() -> list[str]:
    """Names of all sections in reading order."""
    return [cls.name for cls in SECTION_CLASSES]


def build_sections(config: LessonConfig) -> list[Section]:
    """Instantiate the sections selected by ``config.sections``.

    An empty selection means every section. Reading order is kept no matter
    how the selection is ordered.

    Raises:
        ValueError: If a selected name is not a known section.
    """
    known = section_names()
    unknown = [name for name in config.sections if name not in known]
    if unknown:
        raise ValueError(
            f"Unknown section(s): {', '.join(unknown)}; "
            f"choose from {', '.join(known)}"
        )
    selected = set(config.sections) or set(known)
    sections = [cls() for cls in SECTION_CLASSES if cls.name in selected]
    logger.debug("Built %d section(s): %s", len(sections), [s.name for s in sections])
    return sections

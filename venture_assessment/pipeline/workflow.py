"""LangGraph workflow for the three-phase analysis.

The graph runs company -> competitive -> market. When the starting input is
a technology description rather than a URL, the conditional entry point
skips straight to competitive. Nodes raise on failure, which ends the run.
"""

import logging
from typing import Any, Awaitable, Callable, Literal, TypedDict

from langgraph.graph import END, StateGraph

logger = logging.getLogger(__name__)


class PipelineState(TypedDict, total=False):
    """State carried between workflow nodes.
    
    Attributes:
        input_kind: "url" or "text"
        input_value: Normalized URL or technology description
        company: ProviderResult of the company phase
        tech_description: Description fed to competitive and market
        competitive: ProviderResult of the competitive phase
        market: ProviderResult of the market phase
    """
    
    input_kind: str
    input_value: str
    company: Any
    tech_description: str
    competitive: Any
    market: Any


Node = Callable[[PipelineState], Awaitable[dict[str, Any]]]


def _route_entry(state: PipelineState) -> Literal["company", "competitive"]:
    """Start with the company phase only for URL input."""
    if state.get("input_kind") == "url":
        return "company"
    return "competitive"


def create_workflow(company_node: Node, competitive_node: Node, market_node: Node) -> Any:
    """Build and compile the analysis graph.
    
    Args:
        company_node: Runs the company phase, returns the company result and
            the derived technology description
        competitive_node: Runs the competitive phase
        market_node: Runs the market phase
    
    Returns:
        Compiled StateGraph ready for ainvoke()
    """
    graph = StateGraph(PipelineState)
    
    graph.add_node("company", company_node)
    graph.add_node("competitive", competitive_node)
    graph.add_node("market", market_node)
    
    graph.set_conditional_entry_point(
        _route_entry,
        {
            "company": "company",
            "competitive": "competitive",
        }
    )
    
    graph.add_edge("company", "competitive")
    graph.add_edge("competitive", "market")
    graph.add_edge("market", END)
    
    logger.debug("Analysis workflow graph built")
    
    return graph.compile()

"""
Lineage Graph — the cell dependency graph of a session as a picture.

Uses ``networkx`` for the graph and layout and ``matplotlib`` for rendering.
Nodes are colour-coded: inputs green, calculations orange, outputs salmon,
errors red.
"""

import logging

import matplotlib

matplotlib.use("Agg")  # non-interactive backend
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import networkx as nx

logger = logging.getLogger(__name__)

KIND_COLOURS = {
    "input": "#90EE90",   # light green
    "calc": "#FFD580",    # light orange
    "output": "#FFA07A",  # salmon
    "error": "#FF6B6B",   # red
}


def build_lineage_graph(session) -> nx.DiGraph:
    """Return a DiGraph with an edge ``A -> B`` whenever B's formula uses A.

    Node attributes: ``kind`` (input / calc / output / error), ``formula``,
    ``value`` (rendered text) and ``label``.
    """
    graph = session.graph
    G = nx.DiGraph()
    for node_id in graph.node_ids():
        address = graph.addresses.address(node_id)
        record = graph.record(node_id)
        value = session.grid.get_id(node_id)
        has_upstream = bool(graph.upstream(node_id))

        if value is not None and value.is_error:
            kind = "error"
        elif not has_upstream:
            kind = "input"
        elif record.downstream:
            kind = "calc"
        else:
            kind = "output"

        shown = value.render() if value is not None else ""
        label = f"{address}\n{shown}" if shown else address
        G.add_node(address, kind=kind, formula=record.formula, value=shown, label=label)

    for node_id in graph.node_ids():
        source = graph.addresses.address(node_id)
        for target in graph.to_addresses(graph.record(node_id).downstream):
            G.add_edge(source, target)
    return G


def _layout(G: nx.DiGraph):
    try:
        for depth, generation in enumerate(nx.topological_generations(G)):
            for n in generation:
                G.nodes[n]["subset"] = depth
        return nx.multipartite_layout(G, subset_key="subset", align="horizontal")
    except nx.NetworkXUnfeasible:
        # Cycles have no generations
        return nx.spring_layout(G, k=2.5, iterations=80, seed=42)


def render_lineage(session, output_png: str, title: str = "Cell Dependencies") -> str:
    """Render the session's dependency graph to *output_png*."""
    G = build_lineage_graph(session)

    if not G.nodes:
        fig, ax = plt.subplots(figsize=(6, 4))
        ax.text(0.5, 0.5, "No formula cells", ha="center", va="center",
                fontsize=14)
        ax.set_axis_off()
        fig.savefig(output_png, dpi=150, bbox_inches="tight")
        plt.close(fig)
        return output_png

    pos = _layout(G)
    n_nodes = len(G.nodes)
    fig, ax = plt.subplots(figsize=(max(8, n_nodes * 0.8), max(6, n_nodes * 0.5)))
    ax.set_title(title, fontsize=16, fontweight="bold", pad=20)

    colour_map = [KIND_COLOURS[G.nodes[n]["kind"]] for n in G.nodes]
    labels = {n: G.nodes[n]["label"] for n in G.nodes}
    nx.draw_networkx_nodes(G, pos, ax=ax, node_color=colour_map,
                           node_size=max(1500, 4000 - n_nodes * 30),
                           edgecolors="#555555", linewidths=1.2)
    nx.draw_networkx_labels(G, pos, labels=labels, ax=ax,
                            font_size=max(5, 9 - n_nodes // 40))
    nx.draw_networkx_edges(G, pos, ax=ax, edge_color="#888888",
                           arrows=True, arrowsize=15, width=1.0,
                           connectionstyle="arc3,rad=0.1")

    legend_handles = [mpatches.Patch(color=colour, label=kind.capitalize())
                      for kind, colour in KIND_COLOURS.items()]
    ax.legend(handles=legend_handles, loc="upper left", fontsize=10)
    ax.set_axis_off()
    fig.tight_layout()
    fig.savefig(output_png, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Dependency graph saved to {output_png}")
    return output_png

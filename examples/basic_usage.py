"""Basic usage example for kg-transform-lib."""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


from kg_transform import (
    Graph,
    GraphFilter,
    LayoutOptions,
    MergeOptions,
    MergeStrategy,
    NodeSizeOptions,
    SubgraphOptions,
    TraversalOptions,
    analyze_graph,
    apply_layout,
    calculate_node_sizes,
    extract_subgraph,
    filter_graph,
    merge_graphs,
)


def main():
    print("=" * 60)
    print("kg-transform-lib - Basic Usage Example")
    print("=" * 60)

    # 1. Build a graph from the content-side dictionary shape
    print("\n1. Loading graph...")
    graph = Graph.from_dict(
        {
            "nodes": [
                {"id": "python", "label": "Python", "type": "Language"},
                {"id": "numpy", "label": "NumPy", "type": "Library"},
                {"id": "pandas", "label": "pandas", "type": "Library"},
                {"id": "arrays", "label": "N-d arrays", "type": "Concept"},
                {"id": "frames", "label": "DataFrames", "type": "Concept"},
            ],
            "edges": [
                {"source": "numpy", "target": "python", "label": "WRITTEN_IN"},
                {"source": "pandas", "target": "python", "label": "WRITTEN_IN"},
                {"source": "pandas", "target": "numpy", "label": "DEPENDS_ON"},
                {"source": "numpy", "target": "arrays", "label": "PROVIDES"},
                {"source": "pandas", "target": "frames", "label": "PROVIDES"},
            ],
            "metadata": {"name": "python-data"},
        }
    )
    print(f"   Nodes: {len(graph.nodes)}, edges: {len(graph.edges)}")

    # 2. Filter down to libraries
    print("\n2. Filtering to Library nodes...")
    libraries = filter_graph(graph, GraphFilter(node_types=["Library"]))
    for node in libraries.nodes:
        print(f"   - {node.label}")

    # 3. Extract the neighbourhood of numpy
    print("\n3. Extracting one hop around numpy...")
    around = extract_subgraph(
        graph,
        SubgraphOptions(root_nodes=["numpy"], traversal=TraversalOptions(max_depth=1)),
    )
    print(f"   {[node.id for node in around.nodes]}")

    # 4. Merge with a second graph
    print("\n4. Merging an extra graph...")
    extra = Graph.from_dict(
        {
            "nodes": [{"id": "numpy", "properties": {"license": "BSD"}}, {"id": "scipy"}],
            "edges": [{"source": "scipy", "target": "numpy", "label": "DEPENDS_ON"}],
            "metadata": {"name": "scientific"},
        }
    )
    merged = merge_graphs(
        graph,
        extra,
        MergeOptions(node_strategy=MergeStrategy.MERGE, merge_node_properties=True),
    )
    print(f"   {merged.metadata['merged_from']} -> {len(merged.nodes)} nodes")
    print(f"   numpy properties: {merged.get_node('numpy').properties}")

    # 5. Size and lay out
    print("\n5. Sizing by degree and running force-directed layout...")
    sized = calculate_node_sizes(merged, NodeSizeOptions(strategy="degree"))
    placed = apply_layout(sized, LayoutOptions(iterations=50, seed=42))
    for node in placed.nodes:
        print(
            f"   {node.id:8s} size={node.style['size']:5.1f} "
            f"at ({node.position.x:6.1f}, {node.position.y:6.1f})"
        )

    # 6. Analysis
    print("\n6. Analysis...")
    report = analyze_graph(placed)
    print(f"   Types: {report.node_types}")
    print(f"   Density: {report.density:.3f}")
    print(f"   Connected: {report.is_connected}")
    top = report.top_in_degree_nodes[0]
    print(f"   Most referenced: {top.label} ({top.degree})")

    print("\n" + "=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()

from passevo.config import PRESET_MINIMAL
from passevo.core.catalog import Catalog
from passevo.core.chromosome import Chromosome
from passevo.search.runner import run_search


def main():
    # Quickstart goal:
    # 1) Build a tiny step catalog
    # 2) Plug in a cost function standing in for "apply passes, measure size"
    # 3) Run a short search and print the best pipeline in encoded form

    # Each step is (step id, one-character abbreviation, opaque handle).
    # The handle would normally be the compiler's pass object; any value works here.
    catalog = Catalog([
        ('ExpressionSimplifier', 's', None),
        ('UnusedPruner', 'u', None),
        ('CommonSubexpressionEliminator', 'c', None),
        ('FunctionInliner', 'i', None),
    ])

    # Chromosomes round-trip through the abbreviation string.
    print('decoded:', Chromosome.decode('cus', catalog))

    # Toy cost: pretend pruning after CSE is what shrinks the program,
    # and every extra step costs a little compile time.
    def cost(chromosome):
        text = chromosome.encode(catalog)
        return 10 - 4 * text.count('cu') + len(text)

    result = run_search(catalog, cost, {'seed': 1, 'max_generations': 30}, preset=PRESET_MINIMAL)

    print('best:', result.best_chromosome.encode(catalog), 'cost:', result.best_cost)
    print('stop_reason:', result.stop_reason, 'evaluations:', result.evaluations)


if __name__ == '__main__':
    main()

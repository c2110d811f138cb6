import numpy as np

class NNA:
    def nearest_neighbor_tsp(self, graph, start=0):
        graph = np.asarray(graph, dtype=float)
        n = len(graph)
        visited = np.zeros(n, dtype=bool)
        tour = [start]
        visited[start] = True
        current_index = start

        for _ in range(n - 1):
            distances = np.where(visited, np.inf, graph[current_index])
            next_index = int(np.argmin(distances))
            tour.append(next_index)
            visited[next_index] = True
            current_index = next_index

        tour.append(tour[0])  # Return to the starting city
        return tour

    def tour_cost(self, graph, tour):
        return float(sum(graph[tour[i]][tour[i + 1]] for i in range(len(tour) - 1)))

    def tour_successors(self, tour):
        successors = [None] * (len(tour) - 1)
        for i in range(len(tour) - 1):
            successors[tour[i]] = tour[i + 1]
        return successors

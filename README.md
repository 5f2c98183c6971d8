# recomesh

recomesh provides three recommenders that read the same plain-text ratings
file. It also provides ranking and rating-accuracy metrics and a small TCP
service that answers recommendation requests.

- **knn** (`recomesh.knn.KnnRecommender`) does user-based collaborative
  filtering. It uses Pearson similarity and by default the 10 nearest
  neighbours.
- **mf** (`recomesh.mf.train`, `recomesh.mf.MfModel`) does matrix
  factorization trained with stochastic gradient descent.
- **graph** (`recomesh.pagerank.PageRankGraph`) runs personalized PageRank
  on the bipartite user–item graph.

## Ratings format

Each record has five fields separated by whitespace:

```
<user_id> <item_id> <category_id> <rating> <timestamp>
```

For example:

```
0 12 3 4.0 1700000000
0 17 1 2.5 1700000100
1 12 3 5.0 1700000200
```

`recomesh.ratings.read_ratings(path)` returns a list of `Rating` records. It
stops reading at the first record that is incomplete or malformed.

## Installing

```
pip install .
```

To also install the test dependencies:

```
pip install ".[test]"
```

## Using the library

```python
from recomesh.knn import KnnRecommender
from recomesh.mf import train
from recomesh.pagerank import build_graph

knn = KnnRecommender(1000, 1000, 10)
knn.load_ratings("ratings.txt")
knn.compute_pearson_matrix()
print(knn.predict(0, 12))
print(knn.recommend(0, 5))

model = train("ratings.txt", 10, 20, 0.01, 0.1, None)
print(model.recommend(0, 5))

graph = build_graph("ratings.txt", 1000, 1000)
print(graph.recommend(0, 5))
```

Notes on each recommender:

- **KNN.** A rating of zero or less counts as "not rated". User and item ids
  outside the configured limits are skipped with a warning. `recommend`
  returns only items the user has not rated.
- **Matrix factorization.** `train` sizes the matrix from the largest user
  and item ids found in the file. You can pass a `numpy.random.Generator` to
  get reproducible results. `train_default(path)` uses 10 factors, 20 epochs,
  a learning rate of 0.01 and a regularization of 0.1. `MfModel.recommend`
  ranks every item by its predicted rating.
- **PageRank.** `PageRankGraph.recommend` returns only items that are not
  already linked to the user.

Each `recommend` method returns a list of item ids, best first. It raises
`ValueError` if the user id is out of range.

`Recommender` loads each algorithm the first time it is asked for. It reads
`knn/ratings.txt`, `mf/ratings.txt` or `graph/ratings.txt` under the base
directory you give it:

```python
from recomesh.recommender import Recommender

reco = Recommender("data")
print(reco.recommend("knn", 0, 5))
```

An unknown algorithm name raises `ValueError`. A missing ratings file raises
`OSError`.

## Evaluating

`recomesh.evaluation` provides the following:

- `load_predictions` reads lines of the form `user item item ...`. It keeps
  at most 10 items per user and skips lines that do not start with a user
  id.
- `load_relevant_items` reads a ratings-format test file and groups the items
  by user.
- `hit_ratio`, `mean_average_precision` and `ndcg` score the ranked lists.
  `ndcg` uses a cutoff of 10.
- `rmse` and `mae` compare predicted ratings with true ratings. Both raise
  `ValueError` if the two lists differ in length or are empty.

## Running the service

Start the server. It listens on `0.0.0.0:9000` by default:

```
recomesh-server --base-dir data
```

The server takes these options:

- `--host` sets the address to listen on.
- `--port` sets the port.
- `--base-dir` names the directory that holds `knn/`, `mf/` and `graph/`.

Each connection carries one request of the form
`<user_id> <algo> <top_n>`. The server replies with the recommended item ids,
separated by commas. If the recommendation fails or the algorithm is unknown,
it replies `ERROR`. If the request is malformed, it replies with a usage
message.

To send a request, run the client:

```
recomesh-client --host 127.0.0.1 --port 9000
```

The client prompts for one request line, such as `6 knn 3`. It prints the
server's reply. From Python, `recomesh.client.send_request(host, port,
message)` sends a request and returns the reply as text.

## Limitations

Trained models are kept only in memory. Nothing is saved to disk, so each
server process trains its models again on first use.

The server reads a single request of at most 1023 bytes per connection, then
closes the connection.
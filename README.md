# treebase

An in-memory table store with a small query language. Every table is
stored column by column: one B-tree holds each column, an AVL tree
holds the tables by name, and a min-heap hands out row ids, reusing
ids that a delete has freed.

## Installing

```
pip install .
```

## Running

```
treebase
```

The command reads queries from standard input. The first line holds
the number of queries that follow. A line whose command is not one of
`CREATE`, `INSERT`, `DELETE`, `UPDATE` or `SELECT` makes it print an
error message, and that line does not count towards the number. If the
input ends early, the run stops there.

```
CREATE TABLE people (name string, age int, born timestamp)
INSERT INTO people VALUES ("ali", 30, 1993/5/12)
SELECT * FROM people WHERE age>20
SELECT (name, age) FROM people WHERE name=="ali"
UPDATE people SET ("reza", 31, 1992/1/1) WHERE id==1
DELETE FROM people WHERE age<18
```

- Column types are `int`, `string` and `timestamp`. Every table also
  gets an `id` column of type `int` in front of its own columns. The
  first row gets id 1.
- `INSERT` takes one value for every column except `id`.
- `UPDATE` takes a new value for every column except `id`. It
  rewrites all matching rows.
- `SELECT` takes `*` or a list of column names. It prints one line per
  matching row, ordered by id, with the chosen columns separated by
  spaces.
- `DELETE`, `UPDATE` and `SELECT` all need a `WHERE` clause.

A condition compares one column with one value using `==`, `<` or
`>`. A column name that the table lacks is taken to mean `id`. Two
conditions may be joined by a separate `&` token (both must hold) or
`|` token (either may hold), for example
`SELECT * FROM people WHERE age>20 & age<40`.

String values go in double quotes and may hold only lower-case letters
and digits. Timestamps are written as a four-digit year, a one- or
two-digit month and a day, separated by `/`, for example `2020/1/5`
or `2020/12/25`. Dates that do not exist, leap days included, are
rejected.

A query that succeeds prints nothing, except `SELECT`. A query that
fails prints a short message that says why.

## Using it from Python

```python
from treebase.database import Database, QueryError

db = Database()
db.execute("CREATE TABLE people (name string, age int)")
db.execute('INSERT INTO people VALUES ("ali", 30)')
print(db.execute("SELECT * FROM people WHERE age>20"))  # ['1 ali 30']
```

`Database.execute` returns the lines a query prints. It raises
`QueryError` when a query cannot be run. `Database.insert`,
`Database.delete`, `Database.update` and `Database.select` take the
token list that `treebase.query.tokenize` produces. `insert` returns
the new row's id. `delete` and `update` return the number of rows they
touched. `select` returns the rendered rows.

`treebase.cli.run(stream, out)` runs a whole script. It reads the
script from one text stream and writes the results to another.

The building blocks can also be used on their own:

- `treebase.btree.BTree`: integer values, with duplicates allowed,
  and range scans.
- `treebase.avltree.AvlTree`: a balanced key/value tree.
- `treebase.minheap.MinHeap`: an integer min-heap.
- `treebase.query`: parses tokens, conditions, timestamps and the
  base-37 string encoding.

## What it does not do

Tables live in memory only. Nothing is written to disk, and all data
is gone when the program exits. Tables cannot be dropped, and columns
cannot be changed once a table has been created.
"""Built-in sample programs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Snippet:
    name: str
    title: str
    source: str


HELLO = Snippet(
    "hello",
    "Hello, World!",
    """package main

import "fmt"

func main() {
	fmt.Println("Hello, World!")
}
""",
)

FIBONACCI = Snippet(
    "fibonacci",
    "Fibonacci sequence",
    """package main

import "fmt"

func fibonacci(n int) {
	a, b := 0, 1
	fmt.Printf("Fibonacci(%d) = %d\\n", 0, a)
	if n == 0 {
		return
	}
	fmt.Printf("Fibonacci(%d) = %d\\n", 1, b)
	for i := 2; i <= n; i++ {
		a, b = b, a+b
		fmt.Printf("Fibonacci(%d) = %d\\n", i, b)
	}
}

func main() {
	fibonacci(20)
}
""",
)

MATRIX = Snippet(
    "matrix",
    "Matrix multiplication",
    """package main

import "fmt"

func multiplyMatrices(a, b [][]int) [][]int {
	rowsA, colsA := len(a), len(a[0])
	colsB := len(b[0])

	result := make([][]int, rowsA)
	for i := range result {
		result[i] = make([]int, colsB)
	}

	for i := 0; i < rowsA; i++ {
		for j := 0; j < colsB; j++ {
			for k := 0; k < colsA; k++ {
				result[i][j] += a[i][k] * b[k][j]
			}
		}
	}
	return result
}

func main() {
	a := [][]int{{1, 2}, {3, 4}}
	b := [][]int{{5, 6}, {7, 8}}

	fmt.Println("Result of matrix multiplication:")
	for _, row := range multiplyMatrices(a, b) {
		fmt.Println(row)
	}
}
""",
)

GREETING = Snippet(
    "greeting",
    "Reading input",
    """package main

import (
	"bufio"
	"fmt"
	"os"
	"strings"
)

func main() {
	scanner := bufio.NewScanner(os.Stdin)

	fmt.Println("What's your name?")
	scanner.Scan()
	name := scanner.Text()

	fmt.Println("What's your favorite color?")
	scanner.Scan()
	color := scanner.Text()

	fmt.Printf("Nice to meet you, %s! %s is a great color!\\n",
		strings.TrimSpace(name),
		strings.TrimSpace(color))
}
""",
)

PROGRESS = Snippet(
    "progress",
    "Redrawing output",
    """package main

import (
	"fmt"
	"strings"
	"time"
)

func main() {
	const col = 30
	// Clear the screen by printing \\x0c.
	bar := fmt.Sprintf("\\x0c[%%-%vs]", col)
	for i := 0; i < col; i++ {
		fmt.Printf(bar, strings.Repeat("=", i)+">")
		time.Sleep(100 * time.Millisecond)
	}
	fmt.Printf(bar+" Done!", strings.Repeat("=", col))
}
""",
)

SNIPPETS: dict[str, Snippet] = {s.name: s for s in (HELLO, FIBONACCI, MATRIX, GREETING, PROGRESS)}


def get_snippet(name: str) -> Snippet:
    key = (name or "").strip().lower()
    snippet = SNIPPETS.get(key)
    if snippet is None:
        known = ", ".join(sorted(SNIPPETS))
        raise KeyError(f"Unknown snippet '{name}'. Known: {known}")
    return snippet

"""Input validation for Raft cluster operations: node ids, addresses, cluster size and timeouts."""